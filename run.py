# run.py

import argparse
import json
import logging
import sys

from dotenv import load_dotenv

load_dotenv()   # Loads variables from .env

from rich import print
from rich.logging import RichHandler
from rich.table import Table

from core.config import get_settings
from core.errors import RequestValidationError
from core.planner import Collaborators, plan_trip


def _day_table(itin) -> Table:
    table = Table(title=itin.summary, show_lines=True)
    table.add_column("Day", justify="right")
    table.add_column("Morning")
    table.add_column("Afternoon")
    table.add_column("Evening")
    table.add_column("Dining")
    table.add_column("Hotel")
    table.add_column("Cost", justify="right")
    for d in itin.itinerary:
        table.add_row(
            str(d.day),
            f"{d.morning.activity}\n{d.morning.cost}",
            f"{d.afternoon.activity}\n{d.afternoon.cost}",
            f"{d.evening.activity}\n{d.evening.cost}",
            f"{d.dining.restaurant} ({d.dining.cuisine})\n{d.dining.cost}",
            f"{d.hotel.name}\n{d.hotel.price}",
            str(d.daily_cost),
        )
    return table


def main(argv=None) -> int:
    p = argparse.ArgumentParser(description="Generate a budget-consistent travel itinerary.")
    p.add_argument("--city", required=True)
    p.add_argument("--budget", required=True)
    p.add_argument("--days", required=True)
    p.add_argument("--preferences", default="")
    p.add_argument("--json", action="store_true", help="print the raw JSON response")
    p.add_argument("--offline", action="store_true",
                   help="skip every external service and synthesize locally")
    p.add_argument("-v", "--verbose", action="store_true")
    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )

    settings = get_settings()
    raw = {
        "city": args.city,
        "budget": args.budget,
        "days": args.days,
        "preferences": args.preferences,
    }
    try:
        itin = plan_trip(raw, settings, Collaborators() if args.offline else None)
    except RequestValidationError as e:
        print(f"[bold red]{e}[/]")
        return 2

    if args.json:
        sys.stdout.write(json.dumps(itin.to_dict(), indent=2, ensure_ascii=False) + "\n")
        return 0

    print(_day_table(itin))
    print(f"Total cost: {settings.currency}{itin.total_cost} "
          f"(budget: {settings.currency}{raw['budget']})")
    if itin.over_budget:
        print("[bold yellow]⚠ Plan exceeds the requested budget.[/]")
    if itin.fallback:
        print(f"[dim]Locally synthesized plan: {itin.error}[/]")
    print("[bold green]Hotels:[/]")
    for h in itin.hotels:
        print(f"  {h.name} – {settings.currency}{h.price_per_night}/night, "
              f"{h.rating}★, {h.distance_from_center or 'n/a'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
