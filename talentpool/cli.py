"""TalentPool CLI."""

import asyncio
import json
import logging
from pathlib import Path
from uuid import UUID

# Load .env file
from dotenv import load_dotenv
load_dotenv()

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from talentpool.config import load_settings
from talentpool.factory import Services, build_services
from talentpool.models import CodeList, JobSearchRequest, JobSource, JobType, SalaryFilter
from talentpool.sources import StaticEmployeeSource, StaticPositionSource, load_internal_data


console = Console()

SOURCE_CHOICES = {
    "internal": JobSource.INTERNAL,
    "external": JobSource.EXTERNAL_API,
}


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


def _build(ctx) -> Services:
    settings = load_settings(ctx.obj["config"])
    data = ctx.obj["data"]
    if data is not None:
        positions, employees = load_internal_data(data)
    else:
        positions, employees = StaticPositionSource(), StaticEmployeeSource()
    return build_services(settings, positions, employees)


def _run(ctx, action):
    """Build the services, run ``action`` against them and close them."""

    async def runner():
        services = _build(ctx)
        try:
            return await action(services)
        finally:
            await services.aclose()

    return asyncio.run(runner())


def _dump(model) -> str:
    return model.model_dump_json(by_alias=True, indent=2)


@click.group()
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, path_type=Path), help="Settings YAML file")
@click.option("--data", "data_path", default=None, type=click.Path(exists=True, path_type=Path), help="Internal positions/employees YAML file")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, config_path: Path | None, data_path: Path | None, verbose: bool):
    """TalentPool - internal and USAJobs job aggregation."""
    _setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config_path
    ctx.obj["data"] = data_path


@cli.command()
@click.option("--keywords", "-q", default=None, help="Search keywords")
@click.option("--location", "-l", default=None, help="Location filter")
@click.option("--source", "sources", multiple=True, type=click.Choice(list(SOURCE_CHOICES)), help="Sources to search (default: all)")
@click.option("--min-salary", type=float, default=None, help="Minimum salary")
@click.option("--max-salary", type=float, default=None, help="Maximum salary")
@click.option("--job-type", "job_types", multiple=True, type=click.Choice([t.value for t in JobType]), help="Job type filter")
@click.option("--remote/--no-remote", default=None, help="Remote positions only / on-site only")
@click.option("--skill", "skills", multiple=True, help="Required skill (any match)")
@click.option("--sort-by", default="relevance", help="title, posted, salary or organization")
@click.option("--sort-direction", default="desc", type=click.Choice(["asc", "desc"]))
@click.option("--page", default=1, type=click.IntRange(min=1))
@click.option("--page-size", default=25, type=click.IntRange(min=1))
@click.option("--json-output", is_flag=True, help="Output as JSON")
@click.pass_context
def search(ctx, keywords, location, sources, min_salary, max_salary, job_types, remote,
           skills, sort_by, sort_direction, page, page_size, json_output):
    """Search internal positions and USAJobs postings."""
    salary_range = None
    if min_salary is not None or max_salary is not None:
        salary_range = SalaryFilter(min_salary=min_salary, max_salary=max_salary)

    request = JobSearchRequest(
        keywords=keywords,
        location=location,
        sources=[SOURCE_CHOICES[s] for s in sources] or list(SOURCE_CHOICES.values()),
        salary_range=salary_range,
        job_types=[JobType(t) for t in job_types],
        is_remote=remote,
        required_skills=list(skills),
        sort_by=sort_by,
        sort_direction=sort_direction,
        page=page,
        page_size=page_size,
    )
    result = _run(ctx, lambda services: services.aggregation.search_jobs(request))

    if json_output:
        click.echo(_dump(result))
        return
    _print_result(result)


def _print_result(result):
    meta = result.metadata
    for warning in meta.warnings:
        console.print(f"[yellow]⚠ {warning.source}: {warning.message}[/yellow]")

    if not result.jobs:
        console.print("[yellow]No jobs found.[/yellow]")
        return

    table = Table(title=f"Jobs (page {result.page}, {result.total_count} total)")
    table.add_column("Source", width=11)
    table.add_column("ID", width=14)
    table.add_column("Title", width=36)
    table.add_column("Organization", width=24)
    table.add_column("Salary", width=20)
    table.add_column("Posted", width=10)
    table.add_column("Candidates", justify="right")

    for job in result.jobs:
        salary = ""
        if job.salary and (job.salary.min_salary or job.salary.max_salary):
            salary = f"{job.salary.min_salary or 0:,.0f}-{job.salary.max_salary or 0:,.0f}"
        table.add_row(
            job.source.value,
            job.id[:14],
            job.title[:36],
            job.organization[:24],
            salary,
            job.posted_date.strftime("%Y-%m-%d") if job.posted_date else "",
            str(len(job.matching_candidates)),
        )

    console.print(table)
    console.print(
        f"[dim]{meta.internal_jobs_count} internal, {meta.external_jobs_count} external "
        f"in {meta.search_duration.total_seconds():.2f}s"
        f"{' - more results available' if meta.has_more_results else ''}[/dim]"
    )


@cli.command()
@click.argument("job_id")
@click.option("--source", default="external", type=click.Choice(list(SOURCE_CHOICES)))
@click.option("--json-output", is_flag=True, help="Output as JSON")
@click.pass_context
def details(ctx, job_id: str, source: str, json_output: bool):
    """Show one job listing."""
    job = _run(ctx, lambda services: services.aggregation.get_job_details(job_id, SOURCE_CHOICES[source]))

    if job is None:
        console.print(f"[red]Job not found: {job_id}[/red]")
        raise SystemExit(1)

    if json_output:
        click.echo(_dump(job))
        return

    console.print(f"[bold]{job.title}[/bold]")
    console.print(f"[dim]{job.organization} / {job.department}[/dim]")
    console.print(f"Location: {job.location}")
    console.print(f"Type: {job.job_type.value}{' (remote)' if job.is_remote else ''}")
    if job.salary:
        console.print(
            f"Salary: {job.salary.min_salary or 0:,.0f} - {job.salary.max_salary or 0:,.0f} "
            f"{job.salary.currency or ''} {job.salary.pay_frequency or ''}"
        )
    if job.external_url:
        console.print(f"URL: {job.external_url}")
    if job.required_skills:
        console.print(f"Skills: {', '.join(job.required_skills)}")
    if job.description:
        console.print(f"\n{job.description}")


@cli.command()
@click.argument("job_id")
@click.option("--source", default="external", type=click.Choice(list(SOURCE_CHOICES)))
@click.option("--json-output", is_flag=True, help="Output as JSON")
@click.pass_context
def candidates(ctx, job_id: str, source: str, json_output: bool):
    """List internal candidates for a job."""
    matches = _run(
        ctx, lambda services: services.aggregation.find_matching_candidates(job_id, SOURCE_CHOICES[source])
    )

    if json_output:
        click.echo(json.dumps([json.loads(_dump(m)) for m in matches], indent=2))
        return

    if not matches:
        console.print("[yellow]No matching candidates.[/yellow]")
        return

    table = Table(title=f"Candidates for {job_id}")
    table.add_column("Name", width=24)
    table.add_column("Email", width=28)
    table.add_column("Position", width=24)
    table.add_column("Score", justify="right")
    table.add_column("Skills", width=30)
    for match in matches:
        table.add_row(
            match.full_name,
            match.email,
            match.current_position,
            f"{match.match_score:.0%}",
            ", ".join(match.matching_skills),
        )
    console.print(table)


@cli.command()
@click.argument("employee_id", type=click.UUID)
@click.option("--page-size", default=10, type=click.IntRange(min=1))
@click.option("--json-output", is_flag=True, help="Output as JSON")
@click.pass_context
def recommend(ctx, employee_id: UUID, page_size: int, json_output: bool):
    """Recommend jobs for an employee based on their current position."""
    result = _run(ctx, lambda services: services.aggregation.get_recommended_jobs(employee_id, page_size))

    if json_output:
        click.echo(_dump(result))
        return
    _print_result(result)


@cli.group()
def codelist():
    """USAJobs code lists."""


def _code_list_arg(value: str) -> CodeList:
    try:
        return CodeList(value.lower())
    except ValueError:
        raise click.BadParameter(
            f"unknown code list '{value}' (choose from: {', '.join(c.value for c in CodeList)})"
        )


def _print_items(title: str, items: list):
    table = Table(title=title)
    table.add_column("Code", width=12)
    table.add_column("Value", width=60)
    table.add_column("Active")
    for item in items:
        table.add_row(item.code or "", item.value or "", "yes" if item.is_active else "no")
    console.print(table)


@codelist.command("show")
@click.argument("name")
@click.option("--json-output", is_flag=True, help="Output as JSON")
@click.pass_context
def codelist_show(ctx, name: str, json_output: bool):
    """Show a code list, e.g. ``occupationalseries``."""
    code_list = _code_list_arg(name)
    items = _run(ctx, lambda services: services.code_lists.get_code_list(code_list))

    if items is None:
        console.print(f"[red]Code list unavailable: {code_list.value}[/red]")
        raise SystemExit(1)

    if json_output:
        click.echo(json.dumps([i.model_dump(mode="json", by_alias=True) for i in items], indent=2))
        return
    _print_items(f"{code_list.value} ({len(items)} items)", items)


@codelist.command("search")
@click.argument("name")
@click.argument("keyword")
@click.option("--json-output", is_flag=True, help="Output as JSON")
@click.pass_context
def codelist_search(ctx, name: str, keyword: str, json_output: bool):
    """Search the active items of a code list by code or value."""
    code_list = _code_list_arg(name)
    items = _run(ctx, lambda services: services.code_lists.search(code_list, keyword))

    if items is None:
        console.print(f"[red]Code list unavailable: {code_list.value}[/red]")
        raise SystemExit(1)

    if json_output:
        click.echo(json.dumps([i.model_dump(mode="json", by_alias=True) for i in items], indent=2))
        return
    _print_items(f"{code_list.value} matching '{keyword}'", items)


@codelist.command("refresh")
@click.pass_context
def codelist_refresh(ctx):
    """Evict every cached code list and re-warm the most used ones."""
    _run(ctx, lambda services: services.code_lists.refresh_all())
    console.print("[green]✓ Code lists refreshed[/green]")


@cli.command()
@click.pass_context
def health(ctx):
    """Check connectivity to the USAJobs search and code list APIs."""

    async def check(services: Services):
        search_ok = False
        if services.job_source is not None:
            search_ok = await services.job_source.validate_connection()
        codes_ok = await services.code_lists.is_available()
        return search_ok, codes_ok

    search_ok, codes_ok = _run(ctx, check)

    for label, ok in (("USAJobs search", search_ok), ("USAJobs code lists", codes_ok)):
        status = "[green]✓ ok[/green]" if ok else "[red]✗ unavailable[/red]"
        console.print(f"{label}: {status}")

    if not (search_ok and codes_ok):
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
