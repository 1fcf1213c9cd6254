import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

CONTRACTS_DIR = "contracts"
MIGRATIONS_DIR = "migrations"
SOURCE_EXT = "sol"
SCRIPT_EXT = "js"

MIGRATION_TEMPLATE = """
const {name} = artifacts.require("{name}");

module.exports = function (deployer) {{
  deployer.deploy({name});
}};
"""


@dataclass(frozen=True)
class GeneratedArtifact:
    name: str
    timestamp: int
    source: str
    contract_path: Path
    migration_path: Path


def qualified_name(base: str, timestamp: int) -> str:
    return f"{base}_{timestamp}"


def rename_contract(source: str, base: str, qualified: str) -> str:
    """Point every ``contract <base>`` declaration at ``qualified``.

    Matches the keyword followed by the exact identifier, so ``contract
    <base>V2`` or a bare ``<base>`` elsewhere in the text stay as they are.
    """
    pattern = re.compile(r"\bcontract\s+" + re.escape(base) + r"\b")
    return pattern.sub(lambda _m: f"contract {qualified}", source)


def render_migration(name: str) -> str:
    return MIGRATION_TEMPLATE.format(name=name)


def write_artifacts(source: str, base: str, root: Union[str, Path],
                    timestamp: Optional[int] = None) -> GeneratedArtifact:
    """Write ``contracts/<base>_<ts>.sol`` and its migration script under root.

    The two writes are not atomic; if the migration write fails the contract
    file stays on disk.
    """
    if timestamp is None:
        timestamp = int(time.time() * 1000)
    name = qualified_name(base, timestamp)
    root = Path(root)

    contracts_dir = root / CONTRACTS_DIR
    contracts_dir.mkdir(parents=True, exist_ok=True)
    contract_path = contracts_dir / f"{name}.{SOURCE_EXT}"
    updated = rename_contract(source, base, name)
    contract_path.write_text(updated, encoding="utf-8")
    logger.info("Wrote new Solidity file: %s", contract_path.name)

    migrations_dir = root / MIGRATIONS_DIR
    migrations_dir.mkdir(parents=True, exist_ok=True)
    migration_path = migrations_dir / f"{timestamp}_deploy_{name}.{SCRIPT_EXT}"
    migration_path.write_text(render_migration(name), encoding="utf-8")
    logger.info("Wrote new migration file: %s", migration_path.name)

    return GeneratedArtifact(
        name=name,
        timestamp=timestamp,
        source=updated,
        contract_path=contract_path,
        migration_path=migration_path,
    )
