"""
PDF Report Writer Module
Renders a user's transactions, budgets and savings goals as a formatted PDF
financial report.

The table layouts double as the input format of the report parser: every
transaction row, budget row and goal card is laid out so its text can be
read back line by line.
"""

import io
import logging
from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from xml.sax.saxutils import escape

from reportlab.graphics.charts.piecharts import Pie
from reportlab.graphics.shapes import Drawing
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer, PageBreak

from config import config
from extractors.primitives import add_months
from models import Budget, Goal, RecordBatch, SectionOptions, Transaction, TransactionType, UserIdentity

logger = logging.getLogger(__name__)

HEADER_COLOR = colors.HexColor('#ef8145')
GRID_COLOR = colors.HexColor('#808183')
ALT_ROW_COLOR = colors.HexColor('#e8e0dc')
INCOME_COLOR = colors.HexColor('#2e7d32')
EXPENSE_COLOR = colors.HexColor('#c62828')
WARNING_COLOR = colors.HexColor('#f9a825')
TRACK_COLOR = colors.HexColor('#dddddd')

CHART_COLORS = [
    '#ef8145', '#2c5aa0', '#2e7d32', '#c62828', '#8e24aa',
    '#00838f', '#f9a825', '#6d4c41', '#546e7a', '#d81b60',
]


class ReportGenerationError(Exception):
    """Raised when the PDF report cannot be built."""
    pass


def budget_status(spent: Decimal, amount: Decimal) -> str:
    """
    Status label for a budget row.

    Args:
        spent: Expenses booked against the budget this month
        amount: Budgeted amount

    Returns:
        "Over Limit" at 100% or more, "Warning" from 80%, otherwise "On Track"
    """
    if amount <= 0:
        return "On Track"
    used = spent / amount * 100
    if used >= 100:
        return "Over Limit"
    if used >= 80:
        return "Warning"
    return "On Track"


class PDFReportWriter:
    """Generates the PDF financial report."""

    def __init__(self, page_size=A4, max_transaction_rows: Optional[int] = None):
        """
        Initialize PDF writer.

        Args:
            page_size: Page size (default: A4)
            max_transaction_rows: Most recent transactions listed (default: config)
        """
        self.page_size = page_size
        self.max_transaction_rows = max_transaction_rows or config.PDF_MAX_TRANSACTION_ROWS
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        """Setup custom paragraph styles."""
        self.styles.add(ParagraphStyle(
            name='BrandTitle',
            parent=self.styles['Heading1'],
            fontSize=22,
            textColor=HEADER_COLOR,
            spaceAfter=4,
            alignment=TA_LEFT,
            fontName='Helvetica-Bold'
        ))

        self.styles.add(ParagraphStyle(
            name='ReportSubtitle',
            parent=self.styles['Normal'],
            fontSize=12,
            textColor=colors.HexColor('#444444'),
            alignment=TA_LEFT
        ))

        self.styles.add(ParagraphStyle(
            name='HeaderMeta',
            parent=self.styles['Normal'],
            fontSize=9,
            leading=13,
            textColor=colors.HexColor('#444444'),
            alignment=TA_RIGHT
        ))

        self.styles.add(ParagraphStyle(
            name='SectionHeading',
            parent=self.styles['Heading2'],
            fontSize=16,
            textColor=colors.HexColor('#2c5aa0'),
            spaceAfter=12,
            spaceBefore=20,
            fontName='Helvetica-Bold'
        ))

        self.styles.add(ParagraphStyle(
            name='InfoText',
            parent=self.styles['Normal'],
            fontSize=10,
            textColor=colors.HexColor('#444444'),
            spaceAfter=6
        ))

        self.styles.add(ParagraphStyle(
            name='CardText',
            parent=self.styles['Normal'],
            fontSize=9,
            leading=20,
            alignment=TA_CENTER
        ))

        self.styles.add(ParagraphStyle(
            name='GoalName',
            parent=self.styles['Normal'],
            fontSize=11,
            fontName='Helvetica-Bold',
            spaceAfter=4
        ))

        self.styles.add(ParagraphStyle(
            name='GoalText',
            parent=self.styles['Normal'],
            fontSize=9,
            textColor=colors.HexColor('#444444'),
            spaceBefore=4
        ))

        self.styles.add(ParagraphStyle(
            name='FooterText',
            parent=self.styles['Normal'],
            fontSize=8,
            textColor=GRID_COLOR,
            alignment=TA_CENTER
        ))

    def generate_report(
        self,
        user: UserIdentity,
        records: RecordBatch,
        sections: Optional[SectionOptions] = None,
        generated_at: Optional[datetime] = None
    ) -> bytes:
        """
        Render the report.

        Args:
            user: Owner of the records
            records: Transactions, budgets and goals to render
            sections: Which sections to include
            generated_at: Report timestamp (default: now); also the reference
                month for budget spending and the monthly comparison

        Returns:
            PDF file content

        Raises:
            ReportGenerationError: If the document cannot be built
        """
        if records is None:
            raise ValueError("records cannot be None")

        sections = sections or SectionOptions()
        generated_at = generated_at or datetime.now()
        logger.info(
            f"Generating PDF report for {user.username}: {len(records.transactions)} transactions, "
            f"{len(records.budgets)} budgets, {len(records.goals)} goals"
        )

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=self.page_size,
            rightMargin=0.6 * inch,
            leftMargin=0.6 * inch,
            topMargin=0.6 * inch,
            bottomMargin=0.6 * inch,
            title="Personal Financial Report",
            author=config.REPORT_BRAND
        )

        story = []
        try:
            story.extend(self._create_header(user, generated_at))

            if sections.transactions:
                story.extend(self._create_financial_summary(records.transactions))
                story.extend(self._create_expense_breakdown(records.transactions))
                story.extend(self._create_monthly_comparison(records.transactions, generated_at.date()))
                story.append(PageBreak())
                story.extend(self._create_transactions_section(records.transactions))

            if sections.budgets and records.budgets:
                story.extend(self._create_budgets_section(records.budgets, records.transactions, generated_at.date()))

            if sections.goals and records.goals:
                story.extend(self._create_goals_section(records.goals))

            story.extend(self._create_footer(generated_at))

            logger.info("Building PDF document...")
            doc.build(story)

        except Exception as e:
            logger.error(f"Error building PDF report: {e}", exc_info=True)
            raise ReportGenerationError(f"Failed to generate PDF report: {e}") from e

        data = buffer.getvalue()
        logger.info(f"PDF report generated successfully ({len(data)} bytes)")
        return data

    def _create_header(self, user: UserIdentity, generated_at: datetime) -> list:
        """Create report header section."""
        meta_lines = [
            f"Generated: {generated_at.strftime('%b %d, %Y at %I:%M %p')}",
            f"User: {escape(user.username)}",
        ]
        if user.email:
            meta_lines.append(escape(user.email))

        brand = [
            Paragraph(escape(config.REPORT_BRAND), self.styles['BrandTitle']),
            Paragraph("Personal Financial Report", self.styles['ReportSubtitle']),
        ]
        meta = Paragraph("<br/>".join(meta_lines), self.styles['HeaderMeta'])

        width = self.page_size[0] - 1.2 * inch
        header = Table([[brand, meta]], colWidths=[width * 0.55, width * 0.45])
        header.setStyle(TableStyle([
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('LINEBELOW', (0, 0), (-1, 0), 2, HEADER_COLOR),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 10),
        ]))
        return [header, Spacer(1, 0.25 * inch)]

    def _create_financial_summary(self, transactions: list[Transaction]) -> list:
        """Four summary cards: income, expenses, net balance, savings rate."""
        income = sum((t.amount for t in transactions if t.type == TransactionType.INCOME), Decimal("0"))
        expenses = sum((t.amount for t in transactions if t.type == TransactionType.EXPENSE), Decimal("0"))
        net = income - expenses
        savings_rate = float(net / income * 100) if income > 0 else 0.0

        cards = [
            ("Total Income", self._money(income), "#2e7d32"),
            ("Total Expenses", self._money(expenses), "#c62828"),
            ("Net Balance", self._signed_money(net), "#2e7d32" if net >= 0 else "#c62828"),
            ("Savings Rate", f"{savings_rate:.1f}%", "#2c5aa0"),
        ]
        cells = [
            Paragraph(
                f"<font color='#808183'>{label}</font><br/>"
                f"<font size='15' color='{color}'><b>{value}</b></font>",
                self.styles['CardText']
            )
            for label, value, color in cards
        ]

        width = (self.page_size[0] - 1.2 * inch) / 4
        table = Table([cells], colWidths=[width] * 4)
        table.setStyle(TableStyle([
            ('BOX', (0, 0), (0, 0), 1, GRID_COLOR),
            ('BOX', (1, 0), (1, 0), 1, GRID_COLOR),
            ('BOX', (2, 0), (2, 0), 1, GRID_COLOR),
            ('BOX', (3, 0), (3, 0), 1, GRID_COLOR),
            ('TOPPADDING', (0, 0), (-1, -1), 8),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 8),
        ]))
        return [
            Paragraph("Financial Summary", self.styles['SectionHeading']),
            table,
            Spacer(1, 0.2 * inch),
        ]

    def _create_expense_breakdown(self, transactions: list[Transaction]) -> list:
        """Pie chart of expenses by category with a legend table."""
        totals: dict[str, Decimal] = defaultdict(Decimal)
        for t in transactions:
            if t.type == TransactionType.EXPENSE:
                totals[t.category or config.DEFAULT_CATEGORY] += t.amount

        if not totals:
            return []

        ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
        grand_total = sum(totals.values(), Decimal("0"))

        drawing = Drawing(160, 160)
        pie = Pie()
        pie.x = 10
        pie.y = 10
        pie.width = 140
        pie.height = 140
        pie.data = [float(amount) for _, amount in ranked]
        pie.labels = None
        pie.slices.strokeColor = colors.white
        pie.slices.strokeWidth = 1
        for i in range(len(ranked)):
            pie.slices[i].fillColor = colors.HexColor(CHART_COLORS[i % len(CHART_COLORS)])
        drawing.add(pie)

        legend_rows = []
        for i, (category, amount) in enumerate(ranked):
            share = float(amount / grand_total * 100) if grand_total else 0.0
            legend_rows.append(['', self._truncate(category, 18), self._money(amount), f"{share:.1f}%"])

        legend = Table(legend_rows, colWidths=[0.2 * inch, 1.5 * inch, 1.0 * inch, 0.6 * inch])
        legend_style = [
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('ALIGN', (2, 0), (-1, -1), 'RIGHT'),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ]
        for i in range(len(ranked)):
            legend_style.append(('BACKGROUND', (0, i), (0, i), colors.HexColor(CHART_COLORS[i % len(CHART_COLORS)])))
        legend.setStyle(TableStyle(legend_style))

        layout = Table([[drawing, legend]], colWidths=[2.6 * inch, 3.8 * inch])
        layout.setStyle(TableStyle([('VALIGN', (0, 0), (-1, -1), 'MIDDLE')]))

        return [
            Paragraph("Expense Breakdown by Category", self.styles['SectionHeading']),
            layout,
            Spacer(1, 0.2 * inch),
        ]

    def _create_monthly_comparison(self, transactions: list[Transaction], as_of: date) -> list:
        """Income vs expenses for the trailing months."""
        months = [
            add_months(as_of.replace(day=1), -offset)
            for offset in range(config.PDF_MONTHS_IN_COMPARISON - 1, -1, -1)
        ]
        income: dict[tuple[int, int], Decimal] = defaultdict(Decimal)
        expenses: dict[tuple[int, int], Decimal] = defaultdict(Decimal)
        for t in transactions:
            key = (t.date.year, t.date.month)
            if t.type == TransactionType.INCOME:
                income[key] += t.amount
            else:
                expenses[key] += t.amount

        data = [['Month', 'Income', 'Expenses', 'Net']]
        for month in months:
            key = (month.year, month.month)
            data.append([
                month.strftime('%b %Y'),
                self._money(income[key]),
                self._money(expenses[key]),
                self._signed_money(income[key] - expenses[key]),
            ])

        table = Table(data, colWidths=[1.6 * inch, 1.6 * inch, 1.6 * inch, 1.6 * inch])
        table.setStyle(self._table_style(len(data), right_align_from=1))
        return [
            Paragraph("Monthly Income vs Expenses", self.styles['SectionHeading']),
            table,
        ]

    def _create_transactions_section(self, transactions: list[Transaction]) -> list:
        """Transaction History table, newest first."""
        elements = [Paragraph("Transaction History", self.styles['SectionHeading'])]

        if not transactions:
            elements.append(Paragraph("No transactions recorded.", self.styles['InfoText']))
            return elements

        recent = sorted(transactions, key=lambda t: t.date, reverse=True)[:self.max_transaction_rows]
        data = [['Date', 'Description', 'Category', 'Type', 'Amount', 'Method']]
        for t in recent:
            try:
                data.append([
                    t.date.strftime('%b %d, %Y'),
                    self._truncate(t.description or '', 25),
                    self._truncate(t.category or config.DEFAULT_CATEGORY, 12),
                    t.type.value,
                    self._signed_money(t.signed_amount),
                    t.payment_method or '-',
                ])
            except Exception as e:
                logger.warning(f"Error formatting transaction {t}: {e}")
                continue

        table = Table(
            data,
            colWidths=[1.05 * inch, 2.1 * inch, 1.05 * inch, 0.85 * inch, 1.0 * inch, 0.95 * inch],
            repeatRows=1
        )
        style = self._table_style(len(data), right_align_from=4, right_align_to=4)
        for i, t in enumerate(recent, start=1):
            color = INCOME_COLOR if t.type == TransactionType.INCOME else EXPENSE_COLOR
            style.add('TEXTCOLOR', (4, i), (4, i), color)
        table.setStyle(style)
        elements.append(table)

        if len(transactions) > self.max_transaction_rows:
            elements.append(Spacer(1, 0.1 * inch))
            elements.append(Paragraph(
                f"Showing {self.max_transaction_rows} most recent transactions out of {len(transactions)} total.",
                self.styles['InfoText']
            ))
        return elements

    def _create_budgets_section(
        self,
        budgets: list[Budget],
        transactions: list[Transaction],
        as_of: date
    ) -> list:
        """Budget Overview table; spending is this month's expenses per category."""
        spent_by_category: dict[str, Decimal] = defaultdict(Decimal)
        for t in transactions:
            if (
                t.type == TransactionType.EXPENSE
                and t.date.year == as_of.year
                and t.date.month == as_of.month
            ):
                spent_by_category[t.category] += t.amount

        data = [['Category', 'Budget', 'Spent', 'Remaining', 'Status']]
        statuses = []
        for b in budgets:
            spent = spent_by_category.get(b.category, Decimal("0"))
            status = budget_status(spent, b.amount)
            statuses.append(status)
            data.append([
                self._truncate(b.category, 30),
                self._money(b.amount),
                self._money(spent),
                self._plain_signed_money(b.amount - spent),
                status,
            ])

        table = Table(data, colWidths=[2.0 * inch, 1.15 * inch, 1.15 * inch, 1.15 * inch, 1.15 * inch])
        style = self._table_style(len(data), right_align_from=1, right_align_to=3)
        status_colors = {"Over Limit": EXPENSE_COLOR, "Warning": WARNING_COLOR, "On Track": INCOME_COLOR}
        for i, status in enumerate(statuses, start=1):
            style.add('TEXTCOLOR', (4, i), (4, i), status_colors[status])
        table.setStyle(style)

        return [
            Spacer(1, 0.2 * inch),
            Paragraph("Budget Overview", self.styles['SectionHeading']),
            table,
        ]

    def _create_goals_section(self, goals: list[Goal]) -> list:
        """One card per savings goal."""
        elements = [
            Spacer(1, 0.2 * inch),
            Paragraph("Savings Goals", self.styles['SectionHeading']),
        ]
        width = self.page_size[0] - 1.2 * inch

        for goal in goals:
            progress = goal.progress
            bar_width = width - 0.4 * inch
            filled = max(bar_width * progress, 0.5)
            bar = Table([['', '']], colWidths=[filled, max(bar_width - filled, 0.5)], rowHeights=[6])
            bar.setStyle(TableStyle([
                ('BACKGROUND', (0, 0), (0, 0), HEADER_COLOR),
                ('BACKGROUND', (1, 0), (1, 0), TRACK_COLOR),
                ('LEFTPADDING', (0, 0), (-1, -1), 0),
                ('RIGHTPADDING', (0, 0), (-1, -1), 0),
            ]))

            deadline = goal.deadline.strftime('%b %d, %Y') if goal.deadline else 'None'
            card = Table([[[
                Paragraph(escape(self._truncate(goal.name, 60)), self.styles['GoalName']),
                bar,
                Paragraph(
                    f"{self._money(goal.current_amount)} of {self._money(goal.target_amount)} "
                    f"({int(progress * 100)}%)",
                    self.styles['GoalText']
                ),
                Paragraph(
                    f"Category: {escape(goal.category or '')} | Deadline: {deadline} | "
                    f"Priority: {goal.priority.value}",
                    self.styles['GoalText']
                ),
            ]]], colWidths=[width])
            card.setStyle(TableStyle([
                ('BOX', (0, 0), (-1, -1), 1, GRID_COLOR),
                ('LEFTPADDING', (0, 0), (-1, -1), 0.2 * inch),
                ('RIGHTPADDING', (0, 0), (-1, -1), 0.2 * inch),
                ('TOPPADDING', (0, 0), (-1, -1), 8),
                ('BOTTOMPADDING', (0, 0), (-1, -1), 8),
            ]))
            elements.append(card)
            elements.append(Spacer(1, 0.15 * inch))

        return elements

    def _create_footer(self, generated_at: datetime) -> list:
        rule = Table([['']], colWidths=[self.page_size[0] - 1.2 * inch], rowHeights=[4])
        rule.setStyle(TableStyle([('LINEABOVE', (0, 0), (-1, 0), 1, GRID_COLOR)]))
        brand = escape(config.REPORT_BRAND)
        return [
            Spacer(1, 0.3 * inch),
            rule,
            Paragraph(f"This report was generated by {brand} - Your Personal Finance Assistant", self.styles['FooterText']),
            Paragraph(f"© {generated_at.year} {brand}. All financial data is confidential.", self.styles['FooterText']),
        ]

    @staticmethod
    def _table_style(row_count: int, right_align_from: int = -1, right_align_to: int = -1) -> TableStyle:
        """Header row in brand orange, grid lines and alternating row shading."""
        style = TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), HEADER_COLOR),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.HexColor('#ffffff')),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTNAME', (0, 1), (-1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('TOPPADDING', (0, 0), (-1, -1), 5),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 5),
            ('GRID', (0, 0), (-1, -1), 0.5, GRID_COLOR),
            *[('BACKGROUND', (0, i), (-1, i), ALT_ROW_COLOR) for i in range(2, row_count, 2)]
        ])
        if right_align_from >= 0:
            style.add('ALIGN', (right_align_from, 1), (right_align_to, -1), 'RIGHT')
        return style

    @staticmethod
    def _money(value: Decimal) -> str:
        return f"${value:,.2f}"

    @staticmethod
    def _signed_money(value: Decimal) -> str:
        """+$12.00 / -$12.00"""
        return f"{'+' if value >= 0 else '-'}${abs(value):,.2f}"

    @staticmethod
    def _plain_signed_money(value: Decimal) -> str:
        """$12.00 / -$12.00"""
        return f"{'-' if value < 0 else ''}${abs(value):,.2f}"

    @staticmethod
    def _truncate(text: str, max_length: int) -> str:
        """
        Truncate text if too long.

        Args:
            text: Text to shorten
            max_length: Maximum length

        Returns:
            Truncated text with ellipsis if needed
        """
        if len(text) <= max_length:
            return text
        return text[:max_length - 3] + "..."


def generate_pdf_report(
    user: UserIdentity,
    records: RecordBatch,
    sections: Optional[SectionOptions] = None,
    generated_at: Optional[datetime] = None
) -> bytes:
    """
    Convenience function to render the PDF financial report.

    Args:
        user: Owner of the records
        records: Records to render
        sections: Which sections to include
        generated_at: Report timestamp

    Returns:
        PDF file content
    """
    writer = PDFReportWriter()
    return writer.generate_report(user, records, sections=sections, generated_at=generated_at)
