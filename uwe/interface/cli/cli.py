import logging
from pathlib import Path
from typing import Any

import click
import yaml
from pydantic import BaseModel, ValidationError

from uwe.application.config_loader import load_config, load_engine_config
from uwe.application.decision_policy import decide
from uwe.domain.models.rule_result import RuleResult
from uwe.domain.models.underwriting_result import UnderwritingDecision
from uwe.interface.cli.output_models import ConfigOutput, DecideOutput

logger = logging.getLogger(__name__)

# Exit code per decision; 1 is reserved for errors.
DECISION_EXIT_CODES: dict[UnderwritingDecision, int] = {
    UnderwritingDecision.APPROVED: 0,
    UnderwritingDecision.REQUIRES_MANUAL_REVIEW: 2,
    UnderwritingDecision.DECLINED: 3,
}


def _json_emit(model: BaseModel) -> None:
    # Single-line JSON, omit None fields (e.g., DecideOutput.decision on error).
    click.echo(model.model_dump_json(exclude_none=True), nl=True)


def _get_json_mode(ctx: click.Context) -> bool:
    obj = ctx.obj or {}
    return bool(obj.get("json", False))


def _load_rule_results(path: Path) -> list[RuleResult]:
    """Read a YAML or JSON list of rule results (JSON is valid YAML)."""
    data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("rule_results")
    if not isinstance(data, list):
        raise ValueError("Results file must contain a list of rule results")
    try:
        return [RuleResult.model_validate(item) for item in data]
    except ValidationError as e:
        raise ValueError(f"Invalid rule result: {e}") from e


@click.group(help="Underwriting engine CLI.")
@click.option("--json", "json_output", is_flag=True, help="Emit machine-readable JSON on stdout.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging on stderr.")
@click.pass_context
def cli(ctx: click.Context, json_output: bool, verbose: bool) -> None:
    ctx.ensure_object(dict)
    ctx.obj["json"] = bool(json_output)
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@cli.command("decide")
@click.argument("results_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def decide_cmd(ctx: click.Context, results_file: Path) -> None:
    """Aggregate recorded rule results into an underwriting decision."""
    try:
        config = load_engine_config(project_root=Path.cwd(), user_home=Path.home())
        rule_results = _load_rule_results(results_file)
        result = decide(
            rule_results,
            reason_separator=config.reason_separator,
            errors_are_critical=config.errors_are_critical,
        )
        exit_code = DECISION_EXIT_CODES[result.decision]
        logger.debug(f"Decided {result.decision.name} from {len(rule_results)} results")

        if _get_json_mode(ctx):
            _json_emit(
                DecideOutput(
                    exit_code=exit_code,
                    decision=result.decision.value,
                    reason=result.decline_reason,
                    rule_results=list(result.rule_results),
                )
            )
            raise click.exceptions.Exit(exit_code)

        header = f"decision={result.decision.name}"
        if result.decline_reason:
            header += f" reason={result.decline_reason}"
        click.echo(header)
        for rule_result in result.rule_results:
            status = "PASS" if rule_result.passed else "FAIL"
            line = f"  {status} {rule_result.name}"
            if rule_result.critical:
                line += " (critical)"
            if rule_result.errored:
                line += " (error)"
            if rule_result.message:
                line += f": {rule_result.message}"
            click.echo(line)

        if exit_code:
            raise click.exceptions.Exit(exit_code)

    except click.exceptions.Exit:
        raise
    except Exception as e:
        if _get_json_mode(ctx):
            _json_emit(DecideOutput(exit_code=1, error=str(e)))
            raise click.exceptions.Exit(1)
        raise click.ClickException(str(e)) from e


@cli.command("config")
@click.pass_context
def config_cmd(ctx: click.Context) -> None:
    """Show the resolved configuration."""
    try:
        cfg = load_config(project_root=Path.cwd(), user_home=Path.home())
        load_engine_config(project_root=Path.cwd(), user_home=Path.home())

        if _get_json_mode(ctx):
            _json_emit(ConfigOutput(exit_code=0, config=cfg))
            raise click.exceptions.Exit(0)

        click.echo(yaml.safe_dump(cfg, sort_keys=True).rstrip())

    except click.exceptions.Exit:
        raise
    except Exception as e:
        if _get_json_mode(ctx):
            _json_emit(ConfigOutput(exit_code=1, error=str(e)))
            raise click.exceptions.Exit(1)
        raise click.ClickException(str(e)) from e
