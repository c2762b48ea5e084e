from __future__ import annotations

import base64
import io
import math
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

from reportlab.graphics.charts.barcharts import VerticalBarChart
from reportlab.graphics.shapes import Drawing
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle


class PDFGenerator:
    def __init__(self):
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        """Setup custom paragraph styles"""
        self.styles.add(
            ParagraphStyle(
                name="CustomTitle",
                parent=self.styles["Heading1"],
                fontSize=18,
                spaceAfter=30,
                textColor=colors.darkblue,
                alignment=1,  # Center
            )
        )

        self.styles.add(
            ParagraphStyle(
                name="CustomHeading",
                parent=self.styles["Heading2"],
                fontSize=14,
                spaceAfter=12,
                textColor=colors.darkblue,
            )
        )

        self.styles.add(
            ParagraphStyle(
                name="CustomSubheading",
                parent=self.styles["Heading3"],
                fontSize=12,
                spaceAfter=6,
                textColor=colors.darkgreen,
            )
        )

        self.styles.add(
            ParagraphStyle(
                name="TableCell",
                parent=self.styles["Normal"],
                fontSize=7,
                leading=9,
            )
        )

    def create_header(self, title: str, subtitle: str | None = None) -> list:
        """Create report header"""
        elements = []
        elements.append(Paragraph(title, self.styles["CustomTitle"]))

        if subtitle:
            elements.append(Paragraph(subtitle, self.styles["CustomSubheading"]))

        gen_date = datetime.now(timezone.utc).strftime("%d/%m/%Y %H:%M UTC")
        elements.append(Paragraph(f"Generated on: {gen_date}", self.styles["Normal"]))
        elements.append(Spacer(1, 20))
        return elements

    def create_kpi_section(self, title: str, kpis: dict[str, Any]) -> list:
        """Two-column label/value table"""
        elements = []
        elements.append(Paragraph(title, self.styles["CustomHeading"]))

        data = []
        for key, value in kpis.items():
            label = key.replace("_", " ").capitalize()
            if isinstance(value, Decimal):
                formatted_value = f"{value:,.2f}"
            else:
                formatted_value = str(value)
            data.append([label, formatted_value])

        if data:
            table = Table(data, colWidths=[3 * inch, 2 * inch])
            table.setStyle(
                TableStyle(
                    [
                        ("BACKGROUND", (0, 0), (-1, -1), colors.lightgrey),
                        ("TEXTCOLOR", (0, 0), (-1, -1), colors.black),
                        ("ALIGN", (0, 0), (-1, -1), "LEFT"),
                        ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
                        ("FONTSIZE", (0, 0), (-1, -1), 10),
                        ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
                        ("TOPPADDING", (0, 0), (-1, -1), 8),
                        ("GRID", (0, 0), (-1, -1), 1, colors.black),
                    ]
                )
            )
            elements.append(table)

        elements.append(Spacer(1, 20))
        return elements

    def create_table_section(
        self, title: str, data: list[dict], columns: list[tuple[str, str]], width: float
    ) -> list:
        """Table with a header row; ``columns`` is a list of (label, row key)."""
        elements = []
        elements.append(Paragraph(title, self.styles["CustomHeading"]))

        if not data:
            elements.append(Paragraph("No data available", self.styles["Normal"]))
            elements.append(Spacer(1, 20))
            return elements

        table_data: list[list[Any]] = [[label for label, _ in columns]]
        for row in data:
            table_row = []
            for _, key in columns:
                value = row.get(key, "")
                if isinstance(value, Decimal):
                    table_row.append(f"{value:,.2f}")
                elif isinstance(value, (date, datetime)):
                    table_row.append(value.strftime("%d/%m/%Y"))
                else:
                    # Wrap long text using Paragraph so it doesn't overflow
                    text = "" if value is None else str(value)
                    table_row.append(Paragraph(text, self.styles["TableCell"]))
            table_data.append(table_row)

        col_width = width / len(columns)
        table = Table(table_data, colWidths=[col_width] * len(columns), repeatRows=1)
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.darkblue),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                    ("ALIGN", (0, 0), (-1, -1), "CENTER"),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, 0), 8),
                    ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
                    ("BACKGROUND", (0, 1), (-1, -1), colors.beige),
                    ("TEXTCOLOR", (0, 1), (-1, -1), colors.black),
                    ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
                    ("FONTSIZE", (0, 1), (-1, -1), 7),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ]
            )
        )

        elements.append(table)
        elements.append(Spacer(1, 20))
        return elements

    def create_bar_chart_section(self, title: str, counts: dict[str, int]) -> list:
        elements = []
        elements.append(Paragraph(title, self.styles["CustomHeading"]))
        elements.append(self._create_bar_chart(counts))
        elements.append(Spacer(1, 20))
        return elements

    def _create_bar_chart(self, counts: dict[str, int]) -> Drawing:
        drawing = Drawing(500, 220)
        chart = VerticalBarChart()
        chart.x = 40
        chart.y = 60
        chart.height = 130
        chart.width = 420

        values = list(counts.values())
        chart.data = [values]
        chart.categoryAxis.categoryNames = [k.replace("_", " ") for k in counts]
        chart.categoryAxis.labels.angle = 20
        chart.categoryAxis.labels.boxAnchor = "ne"
        chart.categoryAxis.labels.fontSize = 7
        chart.bars[0].fillColor = colors.lightblue

        # Keep a little headroom so all-zero charts still render
        chart.valueAxis.valueMin = 0
        chart.valueAxis.valueMax = max(5, math.ceil(max(values or [0]) * 1.2))

        drawing.add(chart)
        return drawing

    def generate_pdf(self, elements: list, *, wide: bool = False) -> str:
        """Generate PDF and return as base64 string"""
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=landscape(A4) if wide else A4,
            rightMargin=36,
            leftMargin=36,
            topMargin=48,
            bottomMargin=18,
        )

        doc.build(elements)
        pdf_data = buffer.getvalue()
        buffer.close()

        return base64.b64encode(pdf_data).decode("utf-8")
