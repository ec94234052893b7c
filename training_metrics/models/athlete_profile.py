from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class AthleteProfile:
    """Persisted athlete settings. Unset values stay None and make the metrics that need them unavailable."""
    name: str
    ftp_watts: Optional[float] = None
    weight_kg: Optional[float] = None
    max_hr_bpm: Optional[float] = None
    resting_hr_bpm: Optional[float] = None
    lthr_bpm: Optional[float] = None
    notes: Optional[str] = None

    @property
    def has_ftp(self) -> bool:
        return self.ftp_watts is not None and self.ftp_watts > 0

    @property
    def has_weight(self) -> bool:
        return self.weight_kg is not None and self.weight_kg > 0


def load_athlete_profile(athlete_dir: Path) -> AthleteProfile:
    """Load athlete profile from profile.json in their directory.

    A missing file yields a profile with every setting unset.
    """
    profile_path = athlete_dir / "profile.json"

    if not profile_path.exists():
        logger.info(f"No profile at {profile_path}, using unset athlete settings")
        return AthleteProfile(name=athlete_dir.name)

    with open(profile_path, 'r') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Corrupted athlete profile {profile_path}: {e}") from e

    known = {f.name for f in fields(AthleteProfile)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown athlete profile keys in {profile_path}: {', '.join(unknown)}")
    data.setdefault("name", athlete_dir.name)
    return AthleteProfile(**data)


def save_athlete_profile(athlete_dir: Path, profile: AthleteProfile) -> None:
    """Save athlete profile to profile.json in their directory."""
    profile_path = athlete_dir / "profile.json"
    athlete_dir.mkdir(parents=True, exist_ok=True)

    with open(profile_path, 'w') as f:
        json.dump(asdict(profile), f, indent=2)
    logger.info(f"Saved athlete profile to {profile_path}")
