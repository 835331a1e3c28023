import os
from dataclasses import dataclass
from typing import Optional

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class EngineConfig:
    """Runtime settings for the engine and its HTTP front end"""

    # Record releases and refuse to release the same transaction twice
    track_released: bool = False

    # JSON file for persistent state; None keeps everything in memory
    store_path: Optional[str] = None

    # Vault instance id, part of every signed request payload
    chain_id: str = "multisig-vault"

    host: str = "0.0.0.0"
    port: int = 10000

    @classmethod
    def reference(cls) -> 'EngineConfig':
        """Release may be repeated once quorum is met"""
        return cls(track_released=False)

    @classmethod
    def strict(cls) -> 'EngineConfig':
        """Each transaction can be released only once"""
        return cls(track_released=True)

    @classmethod
    def from_env(cls, environ=None) -> 'EngineConfig':
        env = os.environ if environ is None else environ
        return cls(
            track_released=env.get("MULTISIG_TRACK_RELEASED", "").strip().lower() in _TRUE_VALUES,
            store_path=env.get("MULTISIG_STORE_PATH") or None,
            chain_id=env.get("MULTISIG_CHAIN_ID", "multisig-vault"),
            host=env.get("HOST", "0.0.0.0"),
            port=int(env.get("PORT", 10000)),
        )
