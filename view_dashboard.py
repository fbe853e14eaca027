#!/usr/bin/env python3
"""
View a user's maternity dashboard in the terminal.

Usage:
    python view_dashboard.py                       # Demo user from a running API
    python view_dashboard.py user-1 --base-url http://localhost:5000
    python view_dashboard.py --local               # Render the seeded in-process store
    python view_dashboard.py --json                # Print the raw dashboard payload
"""

import argparse
import json
import os
import sys
from datetime import datetime
from typing import Optional

import httpx
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from src.claims import NotFoundError
from src.dashboard import get_dashboard
from src.storage import create_entity_store

STATUS_STYLES = {
    "approved": "green",
    "paid": "green",
    "executed": "green",
    "rejected": "red",
    "failed": "red",
    "submitted": "yellow",
    "under_review": "yellow",
    "pending": "yellow",
}


def format_datetime(iso_str: Optional[str]) -> str:
    """Format ISO datetime string for display."""
    if not iso_str:
        return ""
    try:
        dt = datetime.fromisoformat(iso_str.replace("Z", "+00:00"))
        return dt.strftime("%Y-%m-%d")
    except (ValueError, TypeError):
        return str(iso_str)[:10]


def format_money(amount: Optional[str]) -> str:
    """Format a decimal amount string as dollars."""
    if amount in (None, ""):
        return "-"
    try:
        return f"${float(amount):,.2f}"
    except (ValueError, TypeError):
        return str(amount)


def styled_status(status: Optional[str]) -> str:
    if not status:
        return "-"
    style = STATUS_STYLES.get(status)
    return f"[{style}]{status}[/{style}]" if style else status


def make_policy_panel(policy: Optional[dict], stats: dict) -> Panel:
    """Policy overview card."""
    if not policy:
        return Panel("[dim]No policy information available[/dim]", title="Policy Overview", box=box.ROUNDED)

    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")
    table.add_row("Policy #", policy.get("policyNumber", "-"))
    table.add_row("Type", policy.get("policyType", "-"))
    table.add_row("Total Coverage", format_money(policy.get("totalCoverage")))
    table.add_row("Deductible", format_money(policy.get("deductible")))
    table.add_row("Used", format_money(stats.get("coverageUsed")))
    table.add_row("Remaining", format_money(stats.get("coverageRemaining")))
    percent = stats.get("coverageUsagePercent")
    table.add_row("Usage", f"{percent:.1f}%" if percent is not None else "-")
    table.add_row("Active", "Yes" if policy.get("isActive") else "No")
    return Panel(table, title="Policy Overview", box=box.ROUNDED)


def make_claims_table(claims: list) -> Table:
    """Claim timeline, newest first."""
    table = Table(title="Claims", box=box.ROUNDED, header_style="bold cyan")
    table.add_column("Visit", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Type")
    table.add_column("Provider")
    table.add_column("Amount", justify="right")
    table.add_column("Status")

    for claim in claims:
        table.add_row(
            format_datetime(claim.get("visitDate")),
            claim.get("title", ""),
            claim.get("claimType", ""),
            claim.get("providerName", ""),
            format_money(claim.get("amount")),
            styled_status(claim.get("status")),
        )
    return table


def make_transactions_table(transactions: list) -> Table:
    """Smart contract activity, newest first."""
    table = Table(title="Smart Contract Activity", box=box.ROUNDED, header_style="bold cyan")
    table.add_column("Created", style="dim")
    table.add_column("Hash")
    table.add_column("Contract")
    table.add_column("Action")
    table.add_column("Status")

    for tx in transactions:
        metadata = tx.get("metadata") or {}
        table.add_row(
            format_datetime(tx.get("createdAt")),
            tx.get("transactionHash", ""),
            tx.get("contractType", ""),
            str(metadata.get("action", "-")),
            styled_status(tx.get("status")),
        )
    return table


def make_pregnancy_panel(pregnancy: Optional[dict]) -> Panel:
    """Pregnancy tracker card."""
    if not pregnancy:
        return Panel("[dim]No pregnancy week recorded[/dim]", title="Pregnancy Tracker", box=box.ROUNDED)

    trimester = pregnancy.get("trimester", {})
    lines = [
        f"[bold]Week {pregnancy.get('week')}[/bold] - {pregnancy.get('progressPercent')}% complete",
        f"{trimester.get('current')} trimester ({trimester.get('weeks')}) - {trimester.get('description')}",
        "",
    ]
    for milestone in pregnancy.get("milestones", []):
        marker = "[green]✓[/green]" if milestone.get("passed") else "○"
        current = " [yellow](now)[/yellow]" if milestone.get("current") else ""
        lines.append(f"{marker} Week {milestone.get('week')}: {milestone.get('title')}{current}")
    lines.extend(["", f"[bold]What's next:[/bold] {pregnancy.get('nextStep', '')}"])
    return Panel("\n".join(lines), title="Pregnancy Tracker", box=box.ROUNDED)


def render_dashboard(data: dict, console: Console) -> None:
    """Print every dashboard section for one user."""
    user = data.get("user", {})
    stats = data.get("stats", {})

    console.print(Panel(
        f"[bold]{user.get('firstName', '')} {user.get('lastName', '')}[/bold]\n"
        f"{user.get('email', '')}\n"
        f"Due date: {format_datetime(user.get('dueDate')) or '-'}",
        title=f"Dashboard: {user.get('id', '?')}",
        box=box.DOUBLE,
    ))
    console.print(
        f"Active claims: [bold]{stats.get('activeClaims', 0)}[/bold]   "
        f"Coverage used: [bold]{format_money(stats.get('coverageUsed'))}[/bold]"
    )
    console.print(make_policy_panel(data.get("policy"), stats))
    console.print(make_pregnancy_panel(data.get("pregnancy")))
    console.print(make_claims_table(data.get("claims", [])))
    console.print(make_transactions_table(data.get("smartContractTransactions", [])))


def fetch_dashboard(base_url: str, user_id: str) -> dict:
    """Fetch the dashboard payload from a running API."""
    response = httpx.get(f"{base_url.rstrip('/')}/api/dashboard/{user_id}", timeout=10.0)
    response.raise_for_status()
    return response.json()


def load_local_dashboard(user_id: str) -> dict:
    """Build the dashboard from a freshly seeded in-process store."""
    dashboard = get_dashboard(create_entity_store(seed=True), user_id)
    return dashboard.model_dump(mode="json", by_alias=True)


def main():
    parser = argparse.ArgumentParser(description="View a maternity coverage dashboard")
    parser.add_argument("user_id", nargs="?", default="user-1", help="User ID to view")
    parser.add_argument("--base-url", default="http://localhost:5000", help="API base URL")
    parser.add_argument("--local", action="store_true", help="Use the seeded in-process store")
    parser.add_argument("--json", action="store_true", help="Print the raw payload as JSON")

    args = parser.parse_args()
    console = Console()

    try:
        if args.local:
            data = load_local_dashboard(args.user_id)
        else:
            data = fetch_dashboard(args.base_url, args.user_id)
    except httpx.HTTPStatusError as e:
        console.print(f"[red]API error {e.response.status_code}:[/red] {e.response.text}")
        sys.exit(1)
    except httpx.HTTPError as e:
        console.print(f"[red]Could not reach {args.base_url}:[/red] {e}")
        sys.exit(1)
    except NotFoundError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    if args.json:
        print(json.dumps(data, indent=2))
    else:
        render_dashboard(data, console)


if __name__ == "__main__":
    main()
