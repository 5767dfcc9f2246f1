import logging
import shlex
import subprocess


class CommandExecutor:
    """
    Moves a host by running an external management command.

    The command is a template split with shell rules and formatted per
    argument, so an address or token can never inject extra arguments:

        nodetool -h {address} -p {port} move {token}

    A non-zero exit status or a timeout is reported as a RuntimeError
    carrying the command's stderr.
    """
    DEFAULT_COMMAND = "nodetool -h {address} -p {port} move {token}"

    def __init__(
        self,
        command: str = DEFAULT_COMMAND,
        port: int = 7199,
        timeout: float = 300.0,
    ) -> None:
        self._template = shlex.split(command)
        if not self._template:
            raise ValueError("move command must not be empty")

        self._port = port
        self._timeout = timeout
        self._logger = logging.getLogger("infra.command_executor")

    def build(self, address: str, token: int) -> list[str]:
        return [
            arg.format(address=address, port=self._port, token=token)
            for arg in self._template
        ]

    def move(self, address: str, token: int) -> None:
        argv = self.build(address, token)
        self._logger.info(f"Running: {shlex.join(argv)}")

        try:
            proc = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as ex:
            raise RuntimeError(f"Move of {address} timed out after {self._timeout}s") from ex
        except OSError as ex:
            raise RuntimeError(f"Unable to run '{argv[0]}': {ex}") from ex

        if proc.returncode != 0:
            stderr = proc.stderr.strip() or proc.stdout.strip()
            raise RuntimeError(
                f"Move of {address} to {token} failed with exit status "
                f"{proc.returncode}: {stderr}"
            )
