from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
from reportlab.lib import utils
from reportlab.lib.colors import HexColor
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import (
    SimpleDocTemplate, Paragraph, Spacer, Image, Table, TableStyle, PageBreak
)

from hospital_analysis.reporting.base import BaseReport
from hospital_analysis.reporting.formatters import fmt_cell, fmt_header
from hospital_analysis.reporting.registry import REPORTS


# =====================================================
# EXECUTIVE PDF RENDERER
# =====================================================

class ExecutivePDFRenderer(BaseReport):
    name = "pdf"

    PRIMARY = HexColor("#1f2937")
    BORDER = HexColor("#e5e7eb")
    HEADER_BG = HexColor("#f3f4f6")

    def __init__(self, max_table_rows: Optional[int] = 25):
        self.max_table_rows = max_table_rows

    def build(
        self,
        reports: Dict[str, pd.DataFrame],
        output_dir: Path,
        metadata: Optional[Dict[str, Any]] = None,
        quality: Optional[Dict[str, Any]] = None,
        visuals: Optional[List[Dict[str, Any]]] = None,
    ) -> Path:
        return self.render(
            reports,
            Path(output_dir) / "Hospital_Analysis_Report.pdf",
            quality=quality,
            visuals=visuals,
        )

    def render(
        self,
        reports: Dict[str, pd.DataFrame],
        output_path: Path,
        quality: Optional[Dict[str, Any]] = None,
        visuals: Optional[List[Dict[str, Any]]] = None,
    ) -> Path:
        self.validate_results(reports)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        # Wide tables (high-cost patients) need the extra width
        doc = SimpleDocTemplate(
            str(output_path),
            pagesize=landscape(A4),
            rightMargin=30,
            leftMargin=30,
            topMargin=30,
            bottomMargin=30,
        )

        styles = getSampleStyleSheet()
        story: List[Any] = []

        def add_style(name, **kwargs):
            if name not in styles:
                styles.add(ParagraphStyle(name=name, **kwargs))

        add_style(
            "ExecTitle",
            fontSize=22,
            alignment=TA_CENTER,
            spaceAfter=18,
            fontName="Helvetica-Bold",
            textColor=self.PRIMARY,
        )
        add_style(
            "ExecSection",
            fontSize=15,
            spaceBefore=18,
            spaceAfter=10,
            fontName="Helvetica-Bold",
        )
        add_style(
            "ExecBody",
            fontSize=10,
            leading=14,
            spaceAfter=6,
        )
        add_style(
            "ExecCaption",
            fontSize=9,
            alignment=TA_CENTER,
            textColor=HexColor("#6b7280"),
            spaceAfter=12,
        )

        # =================================================
        # COVER PAGE
        # =================================================
        story.append(Paragraph("HOSPITAL ANALYSIS", styles["ExecTitle"]))
        story.append(Paragraph("Executive Performance Report", styles["ExecSection"]))

        quality = quality or {}
        story.append(Paragraph(
            f"Patients analysed: {quality.get('rows_accepted', '-')}<br/>"
            f"Rows rejected: {quality.get('rows_rejected', '-')}<br/>"
            f"Generated: {datetime.now(timezone.utc):%Y-%m-%d}",
            styles["ExecBody"],
        ))

        dashboard = reports.get("executive_dashboard")
        if dashboard is not None and not dashboard.empty:
            story.append(Paragraph(REPORTS["executive_dashboard"].title, styles["ExecSection"]))
            story.append(self._table(dashboard))
        story.append(PageBreak())

        # =================================================
        # VISUALS
        # =================================================
        if visuals:
            story.append(Paragraph("Visual Evidence", styles["ExecSection"]))
            for vis in visuals:
                path = Path(vis.get("path", ""))
                if not path.exists():
                    continue
                img = utils.ImageReader(str(path))
                iw, ih = img.getSize()
                w = 6.5 * inch
                h = min((ih / iw) * w, 4.5 * inch)
                story.append(Image(str(path), width=w, height=h))
                story.append(Paragraph(vis.get("caption", ""), styles["ExecCaption"]))
            story.append(PageBreak())

        # =================================================
        # REPORT TABLES
        # =================================================
        for name, table in reports.items():
            if name == "executive_dashboard":
                continue
            spec = REPORTS.get(name)
            story.append(Paragraph(spec.title if spec else fmt_header(name), styles["ExecSection"]))
            if spec:
                story.append(Paragraph(spec.description, styles["ExecBody"]))

            if table.empty:
                story.append(Paragraph("No rows.", styles["ExecBody"]))
                continue

            story.append(self._table(table))
            hidden = len(table) - (self.max_table_rows or len(table))
            if hidden > 0:
                story.append(Paragraph(f"{hidden} more rows in the CSV export.", styles["ExecCaption"]))
            story.append(Spacer(1, 10))

        doc.build(story)
        return output_path

    def _table(self, table: pd.DataFrame) -> Table:
        columns = list(table.columns)
        rows = [[fmt_header(c) for c in columns]]
        for row in self.table_rows(table, self.max_table_rows):
            rows.append([fmt_cell(c, row[c]) for c in columns])

        out = Table(rows, repeatRows=1)
        out.setStyle(TableStyle([
            ("GRID", (0, 0), (-1, -1), 0.5, self.BORDER),
            ("BACKGROUND", (0, 0), (-1, 0), self.HEADER_BG),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 8),
            ("PADDING", (0, 0), (-1, -1), 4),
        ]))
        return out
