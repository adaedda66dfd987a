"""
NuGet Client - Package build and push through the nuget command line
"""

import subprocess
from pathlib import Path
from typing import List, Optional, Union

from nsis_build.utils.exceptions import PackagingError
from nsis_build.utils.logger import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]


class NuGetClient:
    """
    Runs `nuget pack` and `nuget push`.

    The API key is passed on the command line but never logged.
    """

    def __init__(self, executable: str = "nuget", timeout: Optional[float] = 600):
        """
        Initialize the client.

        Args:
            executable: nuget command or path to nuget.exe
            timeout: Seconds before a nuget invocation is abandoned
        """
        self.executable = executable
        self.timeout = timeout

    def pack(self, nuspec_path: PathLike, version: str, output_directory: PathLike) -> Path:
        """
        Build a package from a manifest.

        Args:
            nuspec_path: Path to the .nuspec manifest
            version: Package version to stamp
            output_directory: Directory the .nupkg is written to

        Returns:
            The output directory
        """
        output = Path(output_directory)
        args = [
            "pack", str(nuspec_path),
            "-Version", version,
            "-OutputDirectory", str(output),
            "-NonInteractive",
        ]
        logger.info(f"[NUGET] Packing {Path(nuspec_path).name} version {version} into {output}")
        self._run("pack", args, cwd=Path(nuspec_path).parent)
        return output

    def push(
        self,
        package_path: PathLike,
        source: str,
        api_key: str,
        skip_duplicate: bool = True
    ) -> None:
        """
        Push a package to a registry.

        Args:
            package_path: The .nupkg file
            source: Registry URL
            api_key: Registry credential
            skip_duplicate: Treat an already-published version as success
        """
        args = [
            "push", str(package_path),
            "-Source", source,
            "-ApiKey", api_key,
            "-NonInteractive",
        ]
        if skip_duplicate:
            args.append("-SkipDuplicate")
        logger.info(f"[NUGET] Pushing {Path(package_path).name} to {source}")
        self._run("push", args, secrets=[api_key])

    def _run(
        self,
        operation: str,
        args: List[str],
        cwd: Optional[Path] = None,
        secrets: Optional[List[str]] = None
    ) -> str:
        command = [self.executable] + args
        printable = " ".join(self._mask(part, secrets) for part in command)
        logger.debug(f"[NUGET] $ {printable}")

        try:
            result = subprocess.run(
                command,
                cwd=str(cwd) if cwd else None,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except FileNotFoundError as e:
            raise PackagingError(
                f"nuget {operation}",
                f"NuGet executable '{self.executable}' not found",
                original_error=e
            )
        except subprocess.TimeoutExpired:
            # TimeoutExpired renders the full command line, API key included
            raise PackagingError(
                f"nuget {operation}",
                f"Timed out after {self.timeout} seconds"
            ) from None

        output = self._mask((result.stdout or "") + (result.stderr or ""), secrets)
        if result.returncode != 0:
            raise PackagingError(
                f"nuget {operation}",
                output.strip().splitlines()[-1] if output.strip() else "nuget reported an error",
                exit_code=result.returncode,
                output=output
            )

        for line in output.splitlines():
            if line.strip():
                logger.debug(f"[NUGET] {line}")
        return output

    @staticmethod
    def _mask(text: str, secrets: Optional[List[str]]) -> str:
        for secret in secrets or []:
            if secret:
                text = text.replace(secret, "***")
        return text
