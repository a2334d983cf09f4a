"""Command-line harness: reconstruct the secret of one or more share files.

Example::

    shamir-reconstruct testcase1.json testcase2.json

Each file is processed on its own; a broken file is reported and the
remaining files still run.  The exit status is 1 if any file failed.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional

import click

from .config import SUBSET_POLICIES, ReconstructionConfig
from .crypto.decoding import parse_decimal
from .errors import ReconstructionError
from .reconstruct import RequestOutcome, reconstruct_many
from .records import KEYS_FIELD, read_record

logger = logging.getLogger(__name__)

RULE = "=" * 50


def _configure_logging(verbose: int) -> None:
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


def _load_all(paths: tuple[str, ...]) -> tuple[list, dict[str, RequestOutcome]]:
    """Read every file; failures become outcomes instead of aborting the run."""
    requests = []
    failed: dict[str, RequestOutcome] = {}
    for path in paths:
        try:
            requests.append((path, read_record(path)))
        except (OSError, ReconstructionError) as exc:
            logger.error("%s: %s", path, exc)
            failed[path] = RequestOutcome(name=path, error=exc)
    return requests, failed


def _declared_keys(outcome: RequestOutcome, document: Any) -> Optional[tuple]:
    """Return ``(n, k)`` from the parsed record, else from the raw document."""
    if outcome.record is not None:
        return outcome.record.n, outcome.record.k
    if isinstance(document, Mapping) and isinstance(document.get(KEYS_FIELD), Mapping):
        keys = document[KEYS_FIELD]
        n, k = parse_decimal(keys.get("n")), parse_decimal(keys.get("k"))
        if n is not None and k is not None:
            return n, k
    return None


def _outcome_to_dict(outcome: RequestOutcome, document: Any = None) -> dict:
    entry: dict = {"file": outcome.name, "ok": outcome.ok}
    declared = _declared_keys(outcome, document)
    if declared is not None:
        entry.update(n=declared[0], k=declared[1])
    if outcome.result is not None:
        result = outcome.result
        entry.update(
            secret=result.secret,
            gaussian=result.gaussian,
            mismatch=result.mismatch,
            points=[[p.x, p.y] for p in result.points],
            surplus=[[p.x, p.y] for p in result.surplus],
            inconsistent=[p.x for p in result.inconsistent],
        )
    else:
        entry["error"] = {
            "type": type(outcome.error).__name__,
            "message": str(outcome.error),
        }
    return entry


def _echo_outcome(outcome: RequestOutcome, document: Any = None) -> None:
    click.echo(f"\nProcessing {outcome.name}:")
    declared = _declared_keys(outcome, document)
    if declared is not None:
        n, k = declared
        click.echo(f"n = {n}, k = {k}, degree = {k - 1}")
    if not outcome.ok:
        click.echo(
            f"Error: {type(outcome.error).__name__}: {outcome.error}", err=True
        )
        return

    result = outcome.result
    decoded = {p.x: p for p in result.points + result.surplus}
    interpolated = {p.x for p in result.points}
    for share in outcome.record.shares:
        marker = " [interpolated]" if share.index in interpolated else ""
        click.echo(
            f"Point {share.index}: y = {share.raw_value} (base {share.base}) "
            f"= {decoded[share.index].y}{marker}"
        )
    click.echo(f"Constant term (Lagrange): {result.secret}")
    if result.gaussian is not None:
        click.echo(f"Constant term (Matrix): {result.gaussian!r}")
    if result.mismatch:
        click.echo("Warning: the two reconstructions disagree", err=True)
    if result.inconsistent:
        xs = ", ".join(str(p.x) for p in result.inconsistent)
        click.echo(f"Warning: shares off the polynomial: {xs}", err=True)


@click.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(dir_okay=False))
@click.option(
    "--policy",
    type=click.Choice(SUBSET_POLICIES),
    default="first",
    show_default=True,
    help="Which degree+1 shares to interpolate when more are present",
)
@click.option("--prime", type=int, default=None, help="Reconstruct modulo this prime")
@click.option(
    "--cross-check/--no-cross-check",
    default=True,
    show_default=True,
    help="Verify the secret with Gaussian elimination",
)
@click.option("--rel-tol", type=float, default=1e-9, show_default=True)
@click.option("--abs-tol", type=float, default=1e-6, show_default=True)
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@click.option("-v", "--verbose", count=True, help="-v for INFO, -vv for DEBUG")
def main(
    files: tuple[str, ...],
    policy: str,
    prime: Optional[int],
    cross_check: bool,
    rel_tol: float,
    abs_tol: float,
    as_json: bool,
    verbose: int,
) -> None:
    """Reconstruct the polynomial constant term (the secret) of each FILE."""
    _configure_logging(verbose)
    try:
        config = ReconstructionConfig(
            subset_policy=policy,
            rel_tolerance=rel_tol,
            abs_tolerance=abs_tol,
            cross_check=cross_check,
            prime=prime,
        )
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from None

    requests, failed = _load_all(files)
    documents = dict(requests)
    solved = {o.name: o for o in reconstruct_many(requests, config)}
    outcomes = [failed.get(path) or solved[path] for path in files]

    if as_json:
        entries = [_outcome_to_dict(o, documents.get(o.name)) for o in outcomes]
        click.echo(json.dumps(entries, indent=2))
    else:
        click.echo("Shamir's Secret Sharing - Polynomial Constant Term Finder")
        click.echo(RULE)
        for outcome in outcomes:
            _echo_outcome(outcome, documents.get(outcome.name))
        click.echo("\n" + RULE)
        click.echo("FINAL RESULTS:")
        for outcome in outcomes:
            value = outcome.result.secret if outcome.ok else "FAILED"
            click.echo(f"{outcome.name}: {value}")

    if not all(o.ok for o in outcomes):
        raise SystemExit(1)


if __name__ == "__main__":
    main()
