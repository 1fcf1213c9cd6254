import logging
import re
import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

logger = logging.getLogger(__name__)

ADDRESS_RE = re.compile(r"contract address:\s+(0x[a-fA-F0-9]+)")
ZERO_ADDRESS = "0x" + "0" * 40

# truffle keeps build/ and network state in its working directory
_toolchain_lock = threading.Lock()


class DeployError(Exception):
    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr


@dataclass(frozen=True)
class DeploymentResult:
    contract_address: Optional[str]
    output: str

    @property
    def confirmed(self) -> bool:
        return self.contract_address is not None


def extract_contract_address(output: str) -> Optional[str]:
    m = ADDRESS_RE.search(output)
    return m.group(1) if m else None


def truffle_commands(truffle: str = "truffle", network: str = "development") -> List[List[str]]:
    return [
        [truffle, "compile"],
        [truffle, "migrate", "--reset", "--network", network],
    ]


def _run(cmd: List[str], cwd: Path, timeout: Optional[float]) -> str:
    try:
        proc = subprocess.run(cmd, cwd=str(cwd), capture_output=True, text=True,
                              check=True, timeout=timeout)
    except subprocess.CalledProcessError as e:
        logger.error("Deployment error (%s exited %s): %s", cmd[1], e.returncode, e.stderr)
        raise DeployError(f"{' '.join(cmd)} exited with status {e.returncode}", e.stderr or "") from e
    except subprocess.TimeoutExpired as e:
        stderr = e.stderr.decode(errors="replace") if isinstance(e.stderr, bytes) else (e.stderr or "")
        logger.error("Deployment error (%s timed out after %ss): %s", cmd[1], timeout, stderr)
        raise DeployError(f"{' '.join(cmd)} timed out after {timeout}s", stderr) from e
    except OSError as e:
        logger.error("Deployment error (could not start %s): %s", cmd[0], e)
        raise DeployError(f"Could not start {cmd[0]}: {e}") from e
    return proc.stdout


def run_deployment(root: Union[str, Path], truffle: str = "truffle",
                   network: str = "development",
                   timeout: Optional[float] = None) -> DeploymentResult:
    """Compile and migrate everything under root, then scrape the address.

    Runs ``truffle compile`` followed by ``truffle migrate --reset``. Each
    step is bounded by ``timeout`` seconds. Calls are serialised across
    threads, and waiting for the toolchain is bounded by the same timeout.
    Raises DeployError on non-zero exit, spawn failure, timeout or a busy
    toolchain.
    """
    root = Path(root)
    if not _toolchain_lock.acquire(timeout=-1 if timeout is None else timeout):
        logger.error("Deployment error: toolchain still busy after %ss", timeout)
        raise DeployError(f"Toolchain busy for more than {timeout}s")
    try:
        output = "".join(_run(cmd, root, timeout) for cmd in truffle_commands(truffle, network))
    finally:
        _toolchain_lock.release()
    logger.debug("Truffle stdout:\n%s", output)

    address = extract_contract_address(output)
    if address is None:
        logger.warning("Deployment finished but no contract address found in output")
    return DeploymentResult(contract_address=address, output=output)
