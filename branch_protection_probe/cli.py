"""CLI entry point for the branch protection harness."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from pathlib import Path

from pydantic import ValidationError

from branch_protection_probe.config_loader import (
    apply_overrides,
    default_config,
    load_config,
)
from branch_protection_probe.errors import (
    ConfigurationError,
    PreflightError,
    ProbeExecutionError,
)
from branch_protection_probe.git import Git
from branch_protection_probe.hosts.base import ProtectionHost
from branch_protection_probe.hosts.loading import load_host_manifest
from branch_protection_probe.models.config import PROBE_KINDS, HarnessConfig, ProbeKind
from branch_protection_probe.reporter import (
    exit_status,
    format_output,
    format_summary,
    log_results_summary,
)
from branch_protection_probe.runner import TestRunner

EXIT_ABORTED = 2
EXIT_INTERRUPTED = 130


@asynccontextmanager
async def open_host(
    host_key: str | None, host_config_json: str
) -> AsyncIterator[ProtectionHost | None]:
    """Open the configured protection host, if any."""
    if host_key is None:
        yield None
        return

    manifest = load_host_manifest(host_key)
    try:
        config = manifest.config_cls(**json.loads(host_config_json))
    except (json.JSONDecodeError, TypeError, ValidationError) as exc:
        raise ConfigurationError(f"Invalid host configuration: {exc}") from exc

    async with manifest.host_factory(config) as host:
        yield host


async def build_config(
    config_path: Path | None,
    targets: Sequence[str],
    remote: str | None,
    timeout: float | None,
    probes: Sequence[ProbeKind] = (),
) -> HarnessConfig:
    """Load the configuration file, or the defaults, and apply overrides."""
    config = await load_config(config_path) if config_path else default_config()
    return apply_overrides(
        config, targets=targets, remote=remote, timeout=timeout, probes=probes
    )


async def run(
    repo_path: Path,
    config_path: Path | None = None,
    targets: Sequence[str] = (),
    probes: Sequence[ProbeKind] = (),
    remote: str | None = None,
    timeout: float | None = None,
    host_key: str | None = None,
    host_config_json: str = "{}",
    json_output: bool = False,
) -> int:
    """Run the branch protection probes and return exit code."""
    log = logging.getLogger("branch_protection_probe")

    try:
        config = await build_config(config_path, targets, remote, timeout, probes)
    except (FileNotFoundError, ConfigurationError) as exc:
        log.error("Invalid configuration: %s", exc)
        return EXIT_ABORTED

    log.info(
        "Probing %d target(s) on %s: %s",
        len(config.targets),
        config.remote,
        ", ".join(target.name for target in config.targets),
    )

    git = Git(repo_path=repo_path, timeout=config.timeout)
    try:
        async with open_host(host_key, host_config_json) as host:
            runner = TestRunner(git=git, config=config, host=host)
            report = await runner.run()
    except (ConfigurationError, PreflightError, ProbeExecutionError) as exc:
        log.error("Aborted before probing: %s", exc)
        return EXIT_ABORTED

    log_results_summary(log, report)

    if json_output:
        print(json.dumps(format_output(report), indent=2))
    else:
        print("\n".join(format_summary(report)))

    return exit_status(report)


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Verify branch protection by attempting prohibited operations"
    )
    parser.add_argument(
        "--repo",
        type=Path,
        default=Path("."),
        help="Working copy used for probing (default: current directory)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML configuration with targets and rejection signatures",
    )
    parser.add_argument(
        "--target",
        action="append",
        default=[],
        help="Branch to probe, may be repeated (overrides configured targets)",
    )
    parser.add_argument(
        "--probe",
        action="append",
        default=[],
        choices=PROBE_KINDS,
        help="Probe kind to run, may be repeated (default: all configured kinds)",
    )
    parser.add_argument("--remote", help="Git remote hosting the targets")
    parser.add_argument(
        "--timeout",
        type=float,
        help="Seconds allowed for each external call",
    )
    parser.add_argument(
        "--host",
        help="Protection host for configuration queries (github, gh-cli)",
    )
    parser.add_argument(
        "--host-config",
        default="{}",
        help="JSON configuration for the protection host",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON instead of summary lines",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logs")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        exit_code = asyncio.run(
            run(
                repo_path=args.repo,
                config_path=args.config,
                targets=args.target,
                probes=args.probe,
                remote=args.remote,
                timeout=args.timeout,
                host_key=args.host,
                host_config_json=args.host_config,
                json_output=args.json,
            )
        )
    except KeyboardInterrupt:
        logging.getLogger("branch_protection_probe").error("Interrupted")
        exit_code = EXIT_INTERRUPTED
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
