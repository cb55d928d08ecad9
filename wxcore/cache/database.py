# ABOUTME: In-memory time series of observations for one station
# ABOUTME: Exports one UTC day at a time as JSON files and trims old entries

import json
import logging
import threading
from datetime import date as date_type, datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

from wxcore.config import Config
from wxcore.weather.components import Station
from wxcore.weather.entry import WxEntry
from wxcore.weather.projection import UnitPreferences, WxAll

log = logging.getLogger(__name__)


def _utc(moment: datetime) -> datetime:
    return moment.astimezone(timezone.utc)


class StationDatabase:
    """
    Timestamp-ordered observations for a single station.

    Adapters may feed the database from several threads, so every access to
    the underlying map holds a lock. Entries are keyed by their capture time
    in UTC.
    """

    def __init__(
        self,
        station: Station,
        data_dir: Optional[Union[str, Path]] = None,
        max_age_days: Optional[int] = None,
    ):
        self.station = station
        self.data_dir = Path(data_dir if data_dir is not None else Config.DATA_DIR)
        self.max_age = timedelta(days=max_age_days if max_age_days is not None else Config.TRIM_AGE_DAYS)
        self._data: Dict[datetime, WxEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, moment: datetime) -> bool:
        with self._lock:
            return _utc(moment) in self._data

    def get(self, moment: datetime) -> Optional[WxEntry]:
        with self._lock:
            return self._data.get(_utc(moment))

    def timestamps(self) -> List[datetime]:
        """All capture times, oldest first"""
        with self._lock:
            return sorted(self._data)

    def add(self, entries: Mapping[datetime, WxEntry], replace: bool = True) -> int:
        """
        Merge observations into the database.

        Args:
            entries: Observations keyed by capture time
            replace: Overwrite an existing entry with the same timestamp

        Returns:
            Number of entries written
        """
        written = 0
        with self._lock:
            for moment, entry in entries.items():
                key = _utc(moment)
                if replace or key not in self._data:
                    self._data[key] = entry
                    written += 1
        log.debug(f"{self.station.name}: stored {written} of {len(entries)} observations")
        return written

    def insert(self, observation: WxEntry, replace: bool = True) -> int:
        """Add a single observation under its own timestamp"""
        return self.add({observation.date_time(): observation}, replace)

    def export_path(self, name: str, day: Union[datetime, date_type]) -> Path:
        if isinstance(day, datetime):
            day = _utc(day).date()
        return self.data_dir / f"{name}_{day.strftime('%Y-%m-%d')}.json"

    def export(
        self,
        name: str,
        day: Union[datetime, date_type],
        units: Optional[UnitPreferences] = None,
    ) -> Path:
        """
        Write every observation of one UTC calendar day to a JSON file.

        The file holds an object keyed by ISO timestamp, oldest first, whose
        values are the serialized projection of each observation.

        Args:
            name: File name prefix, usually the station id
            day: The day to export; datetimes are taken in UTC
            units: Projection units, defaults to the configured preferences

        Returns:
            Path of the written file
        """
        if isinstance(day, datetime):
            day = _utc(day).date()
        units = units or UnitPreferences.from_config()

        with self._lock:
            selected = sorted(
                ((moment, entry) for moment, entry in self._data.items() if moment.date() == day),
                key=lambda item: item[0],
            )

        payload = {
            moment.isoformat(): WxAll.from_observation(entry, units).to_dict()
            for moment, entry in selected
        }

        path = self.export_path(name, day)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False)

        log.info(f"Exported {len(payload)} observations for {name} on {day} to {path}")
        return path

    def trim(self, now: Optional[datetime] = None) -> int:
        """
        Remove observations older than the retention window.

        Returns:
            Number of entries removed
        """
        cutoff = _utc(now or datetime.now(timezone.utc)) - self.max_age
        with self._lock:
            stale = [moment for moment in self._data if moment < cutoff]
            for moment in stale:
                del self._data[moment]
        if stale:
            log.debug(f"{self.station.name}: trimmed {len(stale)} observations older than {cutoff}")
        return len(stale)

    def full_update(
        self,
        entries: Optional[Mapping[datetime, WxEntry]],
        replace: bool,
        name: str,
        day: datetime,
    ) -> List[Path]:
        """
        Add new observations, re-export the given day and the day before, then trim.

        Args:
            entries: New observations, or None when a fetch failed
            replace: Overwrite entries with matching timestamps
            name: Export file prefix
            day: Reference time; its UTC day and the previous one are exported

        Returns:
            Paths of the two exported files
        """
        self.add(entries or {}, replace)
        paths = [
            self.export(name, day),
            self.export(name, day - timedelta(days=1)),
        ]
        self.trim()
        return paths
