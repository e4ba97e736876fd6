"""Console rendering of analysis results."""
from typing import Optional

import click
from colorama import Fore, Style

from autodoc.analyzer import AnalysisResult
from autodoc.extractors.annotations import HttpVerb
from autodoc.extractors.controller_extractor import ControllerDescriptor

VERB_COLORS = {
    HttpVerb.GET: Fore.GREEN,
    HttpVerb.POST: Fore.YELLOW,
    HttpVerb.PUT: Fore.BLUE,
    HttpVerb.PATCH: Fore.CYAN,
    HttpVerb.DELETE: Fore.RED,
}


class ConsoleRenderer:
    """Prints analysis summaries with colorama colors."""

    def __init__(self, color: bool = True):
        self.color = color

    def echo(self, message: str = "") -> None:
        # color=False makes click strip the ANSI codes
        click.echo(message, color=None if self.color else False)

    def print_header(self, title: str):
        """Print section header."""
        self.echo(f"\n{Fore.CYAN}{'━' * 45}")
        self.echo(f"{Fore.CYAN}{title}")
        self.echo(f"{Fore.CYAN}{'━' * 45}{Style.RESET_ALL}\n")

    def print_banner(self, version: str):
        self.echo(f"{Fore.CYAN}{'=' * 44}")
        self.echo(f"{Fore.CYAN}║   {Fore.WHITE}autodoc {version}{Fore.CYAN}")
        self.echo(f"{Fore.CYAN}║   {Fore.WHITE}API documentation from annotated sources{Fore.CYAN}")
        self.echo(f"{Fore.CYAN}{'=' * 44}{Style.RESET_ALL}")
        self.echo()

    def print_result(self, result: AnalysisResult, verbose: bool = False) -> None:
        """Print controllers, endpoints, services and the type summary."""
        self.print_header(f"📡 CONTROLLERS ({len(result.controllers)})")
        if not result.controllers:
            self.echo(f"{Fore.YELLOW}No controllers found")
        for controller in result.controllers:
            self.print_controller(controller, verbose)

        self.print_header(f"⚙️  SERVICES ({len(result.services)})")
        for service in result.services:
            deps = f" ← {', '.join(service.dependencies)}" if service.dependencies else ""
            self.echo(f"{Fore.GREEN}{service.name}{Style.RESET_ALL} ({len(service.methods)} methods){deps}")

        self.print_header(f"📦 TYPES ({len(result.type_schemas)})")
        if verbose:
            for name, entry in result.type_schemas.items():
                self.echo(f"  {Fore.WHITE}{name}{Style.RESET_ALL} [{entry['kind']}] {entry['file_path']}")

        self.print_summary(result)

    def print_controller(self, controller: ControllerDescriptor, verbose: bool = False) -> None:
        base = f" /{controller.base_path.strip('/')}" if controller.base_path else ""
        self.echo(f"{Fore.GREEN}{controller.name}{Style.RESET_ALL}{base} ({controller.file_path})")
        for endpoint in controller.endpoints:
            color = VERB_COLORS.get(endpoint.verb, Fore.WHITE)
            self.echo(
                f"  {color}{endpoint.verb.value:<7}{Style.RESET_ALL} "
                f"{endpoint.full_path}  {Fore.WHITE}{endpoint.summary}{Style.RESET_ALL}"
            )
            if verbose:
                for param in endpoint.parameters:
                    self.echo(f"      {param.location.value}: {param.name} ({param.type_text})")

    def print_summary(self, result: AnalysisResult, output_file: Optional[str] = None) -> None:
        summary = result.summary
        self.print_header("📈 SUMMARY")
        self.echo(f"  Controllers: {summary.get('controllers', 0)}")
        self.echo(f"  Endpoints:   {summary.get('endpoints', 0)}")
        self.echo(f"  Services:    {summary.get('services', 0)}")
        self.echo(
            f"  Types:       {summary.get('types', 0)} "
            f"({summary.get('dtos', 0)} DTOs, {summary.get('interfaces', 0)} interfaces, "
            f"{summary.get('enums', 0)} enums)"
        )
        if output_file:
            self.echo(f"\n{Fore.GREEN}✅ Written to {output_file}")
