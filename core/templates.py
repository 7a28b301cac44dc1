from decimal import Decimal, ROUND_HALF_UP
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from core.config import settings

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def money(value) -> str:
    """Renders an amount with the currency symbol and exactly two decimals."""
    amount = to_money(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}{settings.CURRENCY_SYMBOL}{abs(amount):.2f}"


env = Environment(
    loader=FileSystemLoader(TEMPLATES_DIR),
    autoescape=select_autoescape(["html", "xml"]),
    undefined=StrictUndefined,
)
env.filters["money"] = money


def render_message(name: str, **context) -> str:
    template = env.get_template(f"messages/{name}.txt")
    return template.render(**context).strip()
