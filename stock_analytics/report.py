"""
Printable stock report. Produces a self-contained HTML fragment from the summary KPIs;
turning it into a PDF or sending it anywhere is the exporter's job (see data_handler).
"""

from datetime import date
from html import escape
from typing import Optional

from . import settings, utils
from .schemas import SummaryStats
from .views.summary import performance_status

# French grouping uses a narrow no-break space between thousands.
GROUP_SEPARATOR = "\u202f"
DECIMAL_SEPARATOR = ","

REPORT_TITLE = "RAPPORT DE GESTION DE STOCK AVANCÉ"


def format_number(value: float, max_fraction_digits: int = 3) -> str:
    """
    Formats a number the way a fr-FR locale does: '1 234,5', '-600', '0,333'.
    Trailing zeros of the fraction are dropped.
    """
    rounded = round(value, max_fraction_digits)
    if rounded == 0:
        rounded = 0.0  # no "-0"
    sign = "-" if rounded < 0 else ""
    integer_part, _, fraction = f"{abs(rounded):,.{max_fraction_digits}f}".partition(".")
    integer_part = integer_part.replace(",", GROUP_SEPARATOR)
    fraction = fraction.rstrip("0")
    if fraction:
        return f"{sign}{integer_part}{DECIMAL_SEPARATOR}{fraction}"
    return f"{sign}{integer_part}"


def format_amount(value: float) -> str:
    return f"{format_number(value)} {settings.CURRENCY}"


def performance_message(stats: SummaryStats) -> Optional[str]:
    status = performance_status(stats)
    if status == "deficit":
        return (
            f"Votre marge brute est négative de {format_amount(abs(stats.gross_margin))}. "
            "Analysez les graphiques pour identifier les produits les moins rentables."
        )
    if status == "positive":
        return (
            f"Excellente performance ! Votre marge brute est de +{format_amount(stats.gross_margin)}. "
            "Utilisez les graphiques pour optimiser davantage vos ventes."
        )
    return None


def render_report(
    stats: SummaryStats,
    company_name: Optional[str] = None,
    generated_on: Optional[date] = None,
) -> str:
    company = escape(settings.COMPANY_NAME if company_name is None else company_name)
    generated = utils.get_report_date_str(generated_on)
    message = performance_message(stats)
    performance_block = (
        f'<p style="font-size: 13px; color: #374151; margin-top: 20px;">{escape(message)}</p>'
        if message
        else ""
    )

    return f"""
<div style="padding: 20px; font-family: Arial, sans-serif; background: white;">
  <div style="text-align: center; margin-bottom: 30px; border-bottom: 2px solid #8B5CF6; padding-bottom: 20px;">
    <h1 style="font-size: 28px; color: #8B5CF6; margin: 0; font-weight: bold;">{REPORT_TITLE}</h1>
    <h2 style="font-size: 20px; color: #1f2937; margin: 10px 0; font-weight: bold;">{company}</h2>
    <p style="font-size: 14px; color: #6b7280; margin: 5px 0;">Généré le {generated}</p>
  </div>
  <div style="margin-bottom: 30px;">
    <h3 style="font-size: 18px; font-weight: bold; color: #1f2937; margin-bottom: 15px;">Statistiques Globales</h3>
    <div style="display: grid; grid-template-columns: repeat(2, 1fr); gap: 15px;">
      <div style="background: #f0f9ff; padding: 15px; border-radius: 8px; border: 1px solid #8B5CF6;">
        <p style="font-size: 14px; color: #5B21B6; margin: 0;"><strong>Marge Brute Totale:</strong> {format_amount(stats.gross_margin)}</p>
      </div>
      <div style="background: #fef3c7; padding: 15px; border-radius: 8px; border: 1px solid #f59e0b;">
        <p style="font-size: 14px; color: #92400e; margin: 0;"><strong>Valeur Stock Restant:</strong> {format_number(stats.total_remaining_stock)}</p>
      </div>
    </div>
    {performance_block}
  </div>
</div>
""".strip()


def report_filename(day: Optional[date] = None, extension: str = "html") -> str:
    """e.g. 'Rapport_Stock_Avance_05-03-2024.html'"""
    return f"{settings.REPORT_FILENAME_PREFIX}{utils.get_report_date_str(day, sep='-')}.{extension}"
