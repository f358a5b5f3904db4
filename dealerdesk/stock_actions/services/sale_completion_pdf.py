"""Sale Completion PDF — handover sheet for a sold vehicle using fpdf2.

Portrait A4 layout:
- Company header (name, address, contact, VAT/registration numbers)
- Sale summary (stock id, registration, sale date, customer)
- Completion checklist table built from the free-form completion data
- Dealer/customer signature lines
- Page footer
"""

import io
import os
import re
import unicodedata
import logging
from datetime import date

from fpdf import FPDF

logger = logging.getLogger('dealerdesk.stock_actions.sale_pdf')

_FONT_SEARCH = {
    'regular': [
        '/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf',
        '/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf',
    ],
    'bold': [
        '/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf',
        '/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf',
    ],
}

PLACEHOLDER_COMPANY = {
    'company_name': 'Your Company Name',
    'address_country': 'United Kingdom',
}


def _find_font(style='regular'):
    for path in _FONT_SEARCH.get(style, []):
        if os.path.exists(path):
            return path
    return None


def _latin1(text):
    """Fold text into Latin-1 for the built-in Helvetica font."""
    replacements = {'\u2014': '-', '\u2013': '-', '\u2018': "'", '\u2019': "'",
                    '\u201c': '"', '\u201d': '"', '\u2026': '...', '\u00a0': ' '}
    for old, new in replacements.items():
        text = text.replace(old, new)
    nfkd = unicodedata.normalize('NFKD', text)
    result = ''.join(c for c in nfkd if not unicodedata.combining(c))
    return result.encode('latin-1', errors='replace').decode('latin-1')


def _label(key):
    """'keysHandedOver' / 'keys_handed_over' -> 'Keys handed over'."""
    words = re.sub(r'(?<=[a-z0-9])(?=[A-Z])', ' ', str(key)).replace('_', ' ').split()
    return ' '.join(words).capitalize()


def _value(val):
    if isinstance(val, bool):
        return 'Yes' if val else 'No'
    if val is None or val == '':
        return '-'
    if isinstance(val, (list, tuple)):
        return ', '.join(_value(v) for v in val)
    return str(val)


def checklist_rows(completion_data, prefix=''):
    """Flatten completion data into (label, value) rows; nested objects get a prefix."""
    rows = []
    for key, val in (completion_data or {}).items():
        label = f'{prefix}{_label(key)}'
        if isinstance(val, dict):
            rows.extend(checklist_rows(val, prefix=f'{label} / '))
        else:
            rows.append((label, _value(val)))
    return rows


def company_header(settings):
    """Company header fields from a company_settings row, or the placeholder."""
    settings = settings or PLACEHOLDER_COMPANY
    address = ', '.join(p for p in (
        settings.get('address_street'), settings.get('address_city'),
        settings.get('address_county'), settings.get('address_post_code'),
        settings.get('address_country') or 'United Kingdom',
    ) if p)
    contact = ' | '.join(p for p in (
        settings.get('contact_phone'), settings.get('contact_email'),
        settings.get('contact_website'),
    ) if p)
    ids = ' | '.join(p for p in (
        f'VAT: {settings["vat_number"]}' if settings.get('vat_number') else None,
        f'Company No: {settings["registration_number"]}' if settings.get('registration_number') else None,
    ) if p)
    return {
        'name': settings.get('company_name') or PLACEHOLDER_COMPANY['company_name'],
        'address': address,
        'contact': contact,
        'ids': ids,
    }


class SaleCompletionPDF(FPDF):

    def __init__(self, company):
        super().__init__(orientation='P', unit='mm', format='A4')
        self.company = company
        self._unicode = False
        self._font_family = 'Helvetica'
        self._setup_fonts()

    def _setup_fonts(self):
        regular = _find_font('regular')
        if not regular:
            logger.debug('No Unicode font found, using Helvetica')
            return
        self.add_font('sale', '', regular)
        self.add_font('sale', 'B', _find_font('bold') or regular)
        self._unicode = True
        self._font_family = 'sale'

    def _t(self, text):
        text = '' if text is None else str(text)
        return text if self._unicode else _latin1(text)

    def header(self):
        f = self._font_family
        self.set_font(f, 'B', 15)
        self.cell(0, 8, self._t(self.company['name']), new_x='LMARGIN', new_y='NEXT')
        self.set_font(f, '', 8)
        for line in (self.company['address'], self.company['contact'], self.company['ids']):
            if line:
                self.cell(0, 4, self._t(line), new_x='LMARGIN', new_y='NEXT')
        self.set_draw_color(37, 99, 235)
        self.line(self.l_margin, self.get_y() + 2, self.w - self.r_margin, self.get_y() + 2)
        self.set_draw_color(0, 0, 0)
        self.ln(6)

    def footer(self):
        self.set_y(-15)
        self.set_font(self._font_family, '', 7)
        self.cell(0, 10, f'Page {self.page_no()}/{{nb}}', align='C')


def generate_sale_completion_pdf(sale, company_settings=None):
    """Render the sale completion sheet.

    Args:
        sale: dict with stock_id, registration, sale_date, customer_name, completion_data
        company_settings: the dealer's company_settings row, or None

    Returns:
        io.BytesIO containing the PDF
    """
    pdf = SaleCompletionPDF(company_header(company_settings))
    pdf.alias_nb_pages()
    pdf.add_page()
    pdf.set_auto_page_break(auto=True, margin=20)
    f = pdf._font_family

    pdf.set_font(f, 'B', 13)
    pdf.cell(0, 8, pdf._t('Sales Completion Certificate'), align='C', new_x='LMARGIN', new_y='NEXT')
    pdf.ln(2)

    summary = [
        ('Stock ID', sale.get('stock_id')),
        ('Registration', sale.get('registration') or 'N/A'),
        ('Sale date', sale.get('sale_date') or date.today().isoformat()),
        ('Customer', sale.get('customer_name') or ''),
    ]
    for label, value in summary:
        pdf.set_font(f, 'B', 9)
        pdf.cell(40, 6, pdf._t(label))
        pdf.set_font(f, '', 9)
        pdf.cell(0, 6, pdf._t(value), new_x='LMARGIN', new_y='NEXT')
    pdf.ln(4)

    # Checklist table: 190mm usable width
    col_w = [120, 70]
    pdf.set_font(f, 'B', 8)
    pdf.set_fill_color(37, 99, 235)
    pdf.set_text_color(255, 255, 255)
    pdf.cell(col_w[0], 7, pdf._t('Completion item'), border=1, fill=True)
    pdf.cell(col_w[1], 7, pdf._t('Status'), border=1, fill=True, align='C')
    pdf.ln()
    pdf.set_text_color(0, 0, 0)

    rows = checklist_rows(sale.get('completion_data'))
    if not rows:
        rows = [('No completion details recorded', '-')]
    pdf.set_font(f, '', 8)
    for i, (label, value) in enumerate(rows):
        pdf.set_fill_color(245, 247, 250)
        fill = i % 2 == 1
        pdf.cell(col_w[0], 6, pdf._t(label[:90]), border=1, fill=fill)
        pdf.cell(col_w[1], 6, pdf._t(value[:50]), border=1, fill=fill, align='C')
        pdf.ln()
    pdf.ln(14)

    pdf.set_font(f, '', 8)
    pdf.cell(95, 6, pdf._t('Dealer signature'))
    pdf.cell(95, 6, pdf._t('Customer signature'))
    pdf.ln(14)
    pdf.cell(95, 6, '_________________________')
    pdf.cell(95, 6, '_________________________')
    pdf.ln(6)
    pdf.cell(95, 6, pdf._t('Date:'))
    pdf.cell(95, 6, pdf._t('Date:'))

    output = io.BytesIO()
    pdf.output(output)
    output.seek(0)
    return output
