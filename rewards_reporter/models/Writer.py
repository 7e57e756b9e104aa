import json, csv
from pathlib import Path
from dataclasses import dataclass
from typing import Any

from rewards_reporter.models.Config import BaseConfig


@dataclass
class Writer:
    config: BaseConfig

    @property
    def path(self) -> str:
        return self.config.run_dir

    @property
    def csv_path(self) -> str:
        return f"{self.path}/csv"

    @property
    def json_path(self) -> str:
        return f"{self.path}/json"

    @staticmethod
    def flatten(data: Any, prefix: str = "") -> dict[str, Any]:
        """One csv row per record: nested keys and list positions join with `_`"""
        if isinstance(data, dict):
            children = data.items()
        elif isinstance(data, list):
            children = enumerate(data)
        else:
            return {prefix: data}

        row: dict[str, Any] = {}
        for key, value in children:
            row.update(Writer.flatten(value, f"{prefix}_{key}" if prefix else str(key)))
        return row

    @staticmethod
    def write_csv(data, path: str, fieldnames: list[str]) -> None:
        with open(path, "w+", newline="") as f:
            writer = csv.DictWriter(
                f, delimiter=",", fieldnames=fieldnames, extrasaction="ignore"
            )
            writer.writeheader()
            writer.writerows(data)

    # create the directory in the reports folder for csv and json if it doesn't exist
    def _create_dir(self) -> None:
        Path(self.path).mkdir(parents=True, exist_ok=True)
        Path(self.csv_path).mkdir(parents=True, exist_ok=True)
        Path(self.json_path).mkdir(parents=True, exist_ok=True)

    # write to a csv file
    def to_csv(self, data, name: str, fieldnames: list[str]) -> None:
        self._create_dir()
        self.write_csv(data, f"{self.csv_path}/{name}.csv", fieldnames)

    # write to a json file
    def to_json(self, data, name: str) -> None:
        self._create_dir()
        with open(f"{self.json_path}/{name}.json", "w") as f:
            json.dump(data, f, indent=4)

    def to_csv_and_json(self, data, name: str) -> None:
        """Records go to json as-is and to csv flattened, a single record becomes a single row"""
        records = data if isinstance(data, list) else [data]
        rows = [self.flatten(record) for record in records]
        # columns in the order they first appear across all rows
        fieldnames = list(dict.fromkeys(key for row in rows for key in row))
        self.to_json(data, name)
        self.to_csv(rows, name, fieldnames)

    def mapping_to_csv_and_json(
        self, data: dict[str, Any], name: str, fieldnames: tuple[str, str]
    ) -> None:
        """Writes a flat mapping as-is to json and as two columns to csv"""
        key_name, value_name = fieldnames
        self.to_json(data, name)
        self.to_csv(
            [{key_name: k, value_name: v} for k, v in data.items()],
            name,
            [key_name, value_name],
        )
