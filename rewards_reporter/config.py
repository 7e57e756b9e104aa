import json
from pathlib import Path
from typing import Optional

from web3 import Web3

from rewards_reporter.chain import block_by_date, get_web3
from rewards_reporter.models import Config, InputConfig

RUN_CONFIG_FILE = "run-conf.json"

WINDOW_FIELDS = {"from_block", "to_block", "from_date", "to_date"}
EVENT_FIELDS = {"attestation_events", "transfer_events"}


def resolve_paths(paths: list[str], base_dir: Path) -> list[str]:
    """Event files listed in the config are relative to the config file"""
    return [str(p if Path(p).is_absolute() else base_dir / p) for p in paths]


def resolve_window(
    base_config: InputConfig, w3: Optional[Web3] = None
) -> tuple[int, int]:
    """Turn dates into block numbers, only connecting to a node if a date was passed"""
    from_block, to_block = base_config.from_block, base_config.to_block
    if from_block is None or to_block is None:
        w3 = w3 or get_web3()
        if from_block is None:
            from_block = block_by_date(w3, base_config.from_date)
        if to_block is None:
            to_block = block_by_date(w3, base_config.to_date)
    return from_block, to_block


def create_conf(path: str, w3: Optional[Web3] = None) -> Config:
    """Generates the resolved config object from user input"""
    base_config = InputConfig.model_validate_json(Path(path).read_text())
    base_dir = Path(path).parent

    from_block, to_block = resolve_window(base_config, w3)

    return Config(
        from_block=from_block,
        to_block=to_block,
        attestation_events=resolve_paths(base_config.attestation_events, base_dir),
        transfer_events=resolve_paths(base_config.transfer_events, base_dir),
        **base_config.model_dump(exclude=WINDOW_FIELDS | EVENT_FIELDS),
    )


def save_conf(conf: Config) -> str:
    """Writes the resolved config into the run directory so the run can be repeated"""
    path = Path(conf.run_dir)
    path.mkdir(parents=True, exist_ok=True)
    with open(path / RUN_CONFIG_FILE, "w+") as j:
        j.write(json.dumps(conf.model_dump(mode="json"), indent=4))
    return str(path / RUN_CONFIG_FILE)


def load_conf(run_dir: str) -> Config:
    """Loads an existing resolved config from a run directory"""
    return Config.model_validate_json(Path(f"{run_dir}/{RUN_CONFIG_FILE}").read_text())
