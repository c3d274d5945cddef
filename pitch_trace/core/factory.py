"""Factory for creating Pitch Trace components."""

from typing import Optional

from ..audio.pitch_estimator import PitchEstimator
from ..logger import get_logger
from ..note_types import TargetSpec
from ..session import TunerSession
from .config import ConfigManager
from .interfaces import IAudioInput, IScheduler, IToneOutput

logger = get_logger(__name__)


class ComponentFactory:
    """Factory for creating Pitch Trace components from stored configuration."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """Initialize the component factory.

        Args:
            config_manager: Configuration manager, or None to create a default one
        """
        self.config_manager = config_manager or ConfigManager()

    def _config(self, name: str, overrides: dict) -> dict:
        if name not in self.config_manager.default_configs:
            raise ValueError(f"Unknown configuration section: {name}")
        config = self.config_manager.get_config(name)
        config.update({k: v for k, v in overrides.items() if v is not None})
        return config

    def create_estimator(self, **kwargs) -> PitchEstimator:
        """Create a pitch estimator.

        Args:
            **kwargs: Overrides for the 'pitch_estimator' configuration

        Returns:
            Pitch estimator instance
        """
        config = self._config("pitch_estimator", kwargs)
        return PitchEstimator(**config)

    def create_session(
        self,
        target: Optional[TargetSpec] = None,
        scheduler: Optional[IScheduler] = None,
        tone_output: Optional[IToneOutput] = None,
        **kwargs,
    ) -> TunerSession:
        """Create a tuner session.

        Args:
            target: Initial target specification
            scheduler: Clock for reference playback, or None for a task queue
            tone_output: Reference tone sink, or None for a silent one
            **kwargs: Overrides for the 'session' and 'reference_tone' configuration

        Returns:
            Tuner session instance
        """
        session_config = self._config("session", {})
        tone_config = self._config("reference_tone", {})
        for key, value in kwargs.items():
            if value is None:
                continue
            if key in tone_config:
                tone_config[key] = value
            elif key in session_config:
                session_config[key] = value
            else:
                raise ValueError(f"Unknown session option: {key}")

        session = TunerSession(
            target=target,
            estimator=self.create_estimator(),
            scheduler=scheduler,
            tone_output=tone_output,
            **session_config,
            **tone_config,
        )
        logger.info(f"Created tuner session (tolerance {session.tolerance} cents)")
        return session

    def create_audio_input(self, device_id: Optional[int] = None, **kwargs) -> IAudioInput:
        """Create a sounddevice audio input.

        Args:
            device_id: Audio input device ID, or None for the default device
            **kwargs: Overrides for the 'audio_input' configuration

        Returns:
            Audio input instance
        """
        from ..audio.audio_input import SoundDeviceInput

        config = self._config("audio_input", kwargs)
        instance = SoundDeviceInput(device_id=device_id, **config)
        logger.info("Created audio input")
        return instance

    def create_tone_output(
        self, device_id: Optional[int] = None, sample_rate: Optional[int] = None
    ) -> IToneOutput:
        """Create a sounddevice reference tone output."""
        from ..audio.tone_output import SoundDeviceToneOutput

        rate = sample_rate or self.config_manager.get_config("audio_input")["sample_rate"]
        return SoundDeviceToneOutput(device_id=device_id, sample_rate=rate)
