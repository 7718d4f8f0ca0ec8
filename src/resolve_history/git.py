"""Async git runner for read-only history queries."""

import asyncio
import logging
from pathlib import Path

from common.errors import GitCommandError, TransientProcessError
from common.retry import RetryPolicy

logger = logging.getLogger(__name__)


class GitRepository:
    """
    Runs git commands against a checked-out repository.

    Any output on stderr is treated as a failure even when git exits 0.
    Launch failures listed in the retry policy are retried after a delay.

    Usage:
        repo = GitRepository(Path("osu-wiki"))
        date = await repo.run("log", "-1", "--pretty=%cs", "HEAD")
    """

    def __init__(
        self,
        top_directory: Path,
        retry_policy: RetryPolicy | None = None,
        max_concurrency: int = 8,
    ):
        self.top_directory = top_directory
        self.retry_policy = retry_policy or RetryPolicy()
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def _launch(self, args: tuple[str, ...]) -> asyncio.subprocess.Process:
        policy = self.retry_policy
        attempt = 1
        while True:
            try:
                return await asyncio.create_subprocess_exec(
                    "git",
                    *args,
                    cwd=self.top_directory,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as exc:
                if not policy.is_retryable(exc):
                    raise
                if attempt >= policy.max_attempts:
                    raise TransientProcessError(attempt, exc) from exc

                delay = policy.delay_for(attempt)
                logger.warning(
                    "git launch attempt %d/%d failed (%s), retrying in %.1fs",
                    attempt,
                    policy.max_attempts,
                    exc,
                    delay,
                )
                await asyncio.sleep(delay)
                attempt += 1

    async def run(self, *args: str) -> str:
        """Run git and return its stripped stdout.

        Raises:
            GitCommandError: If git exits non-zero or writes anything to stderr
            TransientProcessError: If git could not be launched within the retry policy
        """
        async with self._semaphore:
            process = await self._launch(args)
            stdout, stderr = await process.communicate()

        error_text = stderr.decode("utf-8", errors="replace").strip()
        if process.returncode != 0 or error_text:
            raise GitCommandError(args, process.returncode, error_text)

        # Baseline history may hold bytes that are not UTF-8
        return stdout.decode("utf-8", errors="replace").strip()
