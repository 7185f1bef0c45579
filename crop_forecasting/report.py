"""
PDF Report Export

Renders a PredictionResult plus chart snapshots into an A4 report:
- Title and generation timestamp
- Input parameters, selected and recommended genetic traits
- Planting window verdict and recommended crops
- Headline (placeholder) prediction figures
- Chart images, then a "Page i of n" footer on every page
"""
import logging
from datetime import date
from io import BytesIO
from typing import Callable, List, Optional, Sequence, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from . import charts
from .config import REPORT
from .schema import PredictionResult

log = logging.getLogger(__name__)

ChartSource = Tuple[str, Callable[[], bytes]]

BRAND_RGB = (34 / 255, 197 / 255, 94 / 255)
MUTED_RGB = (100 / 255, 100 / 255, 100 / 255)
BODY_RGB = (60 / 255, 60 / 255, 60 / 255)
FOOTER_RGB = (150 / 255, 150 / 255, 150 / 255)


class NumberedCanvas(canvas.Canvas):
    """Canvas that defers the footer until the total page count is known."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_footer(total)
            super().showPage()
        super().save()

    def _draw_footer(self, total: int):
        width, _ = self._pagesize
        self.setFont("Helvetica", 8)
        self.setFillColorRGB(*FOOTER_RGB)
        self.drawCentredString(
            width / 2, 10 * mm,
            f"Page {self._pageNumber} of {total} | {REPORT.footer}",
        )


class _Writer:
    """Top-down cursor over a canvas, breaking pages when space runs out."""

    def __init__(self, pdf: canvas.Canvas):
        self.pdf = pdf
        self.width, self.height = A4
        self.margin = REPORT.margin_mm * mm
        self.y = self.margin  # distance from the top edge

    def ensure(self, reserve: float):
        if self.y > self.height - reserve:
            self.pdf.showPage()
            self.y = self.margin

    def text(self, value: str, size: float = 10, rgb=BODY_RGB, indent: float = 5 * mm,
             step: float = 6 * mm, bold: bool = False):
        font = "Helvetica-Bold" if bold else "Helvetica"
        max_width = self.width - 2 * self.margin - indent
        for line in simpleSplit(value, font, size, max_width) or [""]:
            self.ensure(REPORT.text_reserve_mm * mm)
            self.pdf.setFont(font, size)
            self.pdf.setFillColorRGB(*rgb)
            self.pdf.drawString(self.margin + indent, self.height - self.y, line)
            self.y += step

    def heading(self, value: str):
        self.ensure(REPORT.text_reserve_mm * mm + 8 * mm)
        self.text(value, size=14, rgb=(0, 0, 0), indent=0, step=8 * mm, bold=True)

    def centred(self, value: str, size: float, rgb, step: float):
        self.pdf.setFont("Helvetica-Bold" if size > 12 else "Helvetica", size)
        self.pdf.setFillColorRGB(*rgb)
        self.pdf.drawCentredString(self.width / 2, self.height - self.y, value)
        self.y += step

    def gap(self, amount: float = 5 * mm):
        self.y += amount

    def image(self, png: bytes):
        reader = ImageReader(BytesIO(png))
        px_w, px_h = reader.getSize()
        img_w = self.width - 2 * self.margin
        img_h = px_h * img_w / px_w
        if self.y + img_h > self.height - self.margin:
            self.pdf.showPage()
            self.y = self.margin
        self.pdf.drawImage(reader, self.margin, self.height - self.y - img_h, img_w, img_h)
        self.y += img_h + 10 * mm


def _title(value: str) -> str:
    return value[:1].upper() + value[1:] if value else "-"


def default_charts(result: PredictionResult) -> List[ChartSource]:
    sources: List[ChartSource] = [
        ("Yield Prediction Analysis", charts.render_yield_chart),
        ("Genetic Algorithm Evolution", charts.render_ga_chart),
    ]
    if result.weather is not None:
        forecast = result.weather.forecast
        sources.insert(0, ("7-Day Forecast", lambda: charts.render_forecast_chart(forecast)))
    return sources


def build_pdf_report(
    result: PredictionResult,
    chart_sources: Optional[Sequence[ChartSource]] = None,
) -> bytes:
    """
    Render the report and return the PDF bytes.

    A chart whose renderer raises is logged and left out; the rest of the
    report is still produced.
    """
    buf = BytesIO()
    pdf = NumberedCanvas(buf, pagesize=A4)
    pdf.setTitle(REPORT.title)
    w = _Writer(pdf)
    c = result.conditions

    w.gap(5 * mm)
    w.centred(REPORT.title, 22, BRAND_RGB, 10 * mm)
    w.centred(f"Generated on: {result.generated_at.strftime('%Y-%m-%d %H:%M:%S %Z').strip()}",
              10, MUTED_RGB, 15 * mm)

    w.heading("Input Parameters")
    params = [
        f"Crop Type: {_title(c.crop_type)}",
        f"Soil Type: {_title(c.soil_type)}",
        f"Season: {_title(c.season)}",
        f"Temperature: {c.temperature_c:g}°C",
        f"Rainfall: {c.rainfall_mm:g}mm",
    ]
    if result.weather is not None:
        params.append(f"Location: {result.weather.location}")
        params.append(f"Current Humidity: {result.weather.humidity_percent:g}%")
    for line in params:
        w.text(line)
    w.gap()

    w.heading("Selected Genetic Traits")
    if result.selected_traits:
        for trait in result.selected_traits:
            w.text(f"• {trait.label}")
    else:
        w.text("No genetic traits selected")
    w.gap()

    if result.recommended_traits:
        w.heading("AI-Recommended Traits")
        for suggestion in result.recommended_traits:
            w.text(f"• {suggestion.trait.label}: {suggestion.reason}", size=9, step=5 * mm)
        w.gap()

    if result.planting_window is not None:
        verdict = result.planting_window
        w.heading("Planting Window")
        w.text(f"Recommended: {'Yes' if verdict.recommended else 'No'}")
        w.text(verdict.reason, size=9, step=5 * mm)
        if verdict.best_days:
            w.text(f"Best days: {', '.join(verdict.best_days)}")
        w.gap()

    if result.crop_matches:
        w.heading("Recommended Crops")
        for rank, match in enumerate(result.crop_matches, 1):
            w.text(f"{rank}. {match.name} ({match.score}/100): {match.reason}", size=9, step=5 * mm)
        w.gap()

    m = result.metrics
    w.heading("Prediction Results")
    w.text(f"AI Prediction Accuracy: {m.accuracy_pct}%")
    w.text(f"Genetic Algorithm Generations: {m.ga_generations:,}")
    w.text(f"Projected Yield Improvement: +{m.yield_improvement_pct}% vs Traditional")
    w.text("Figures above are illustrative placeholders, not model output.", size=8, rgb=MUTED_RGB)
    w.gap()

    for name, render in (chart_sources if chart_sources is not None else default_charts(result)):
        try:
            png = render()
        except Exception:
            log.exception(f"Error capturing chart '{name}'")
            continue
        w.image(png)

    pdf.showPage()
    pdf.save()
    return buf.getvalue()


def report_filename(day: Optional[date] = None) -> str:
    return f"{REPORT.filename_prefix}_{(day or date.today()).isoformat()}.pdf"
