"""Unit tests for the sale completion PDF generator."""
import io
import re

from dealerdesk.stock_actions.services.sale_completion_pdf import (
    PLACEHOLDER_COMPANY, checklist_rows, company_header, generate_sale_completion_pdf,
)


class TestChecklistRows:

    def test_labels_and_values(self):
        rows = checklist_rows({'keysHandedOver': True, 'serviceBookPresent': False,
                               'mileage_at_handover': 42150, 'notes': ''})
        assert rows == [
            ('Keys handed over', 'Yes'),
            ('Service book present', 'No'),
            ('Mileage at handover', '42150'),
            ('Notes', '-'),
        ]

    def test_nested_objects_are_prefixed(self):
        rows = checklist_rows({'finance': {'provider': 'Acme Finance', 'settled': True}})
        assert rows == [('Finance / Provider', 'Acme Finance'), ('Finance / Settled', 'Yes')]

    def test_lists_joined(self):
        assert checklist_rows({'extras': ['mats', 'tow bar']}) == [('Extras', 'mats, tow bar')]

    def test_empty(self):
        assert checklist_rows(None) == []


class TestCompanyHeader:

    def test_placeholder_when_no_settings(self):
        header = company_header(None)
        assert header['name'] == PLACEHOLDER_COMPANY['company_name']
        assert header['address'] == 'United Kingdom'
        assert header['contact'] == '' and header['ids'] == ''

    def test_full_settings(self):
        header = company_header({
            'company_name': 'Alpha Motors Ltd', 'address_street': '1 Mill Lane',
            'address_city': 'Leeds', 'address_post_code': 'LS1 1AA', 'address_country': 'United Kingdom',
            'contact_phone': '0113 000 0000', 'contact_email': 'sales@alpha.example',
            'vat_number': 'GB123456789', 'registration_number': '01234567',
        })
        assert header['name'] == 'Alpha Motors Ltd'
        assert header['address'] == '1 Mill Lane, Leeds, LS1 1AA, United Kingdom'
        assert header['contact'] == '0113 000 0000 | sales@alpha.example'
        assert header['ids'] == 'VAT: GB123456789 | Company No: 01234567'


class TestGenerate:

    def test_returns_pdf_bytes(self):
        output = generate_sale_completion_pdf({
            'stock_id': 'STK-1', 'registration': 'AB12CDE', 'sale_date': '2026-10-01',
            'customer_name': 'Zoë Brontë',
            'completion_data': {'keysHandedOver': True, 'notes': 'Paid in full — thanks'},
        }, {'company_name': 'Alpha Motors Ltd'})
        assert isinstance(output, io.BytesIO)
        data = output.getvalue()
        assert data.startswith(b'%PDF')
        assert len(data) > 500

    def test_long_checklist_paginates(self):
        completion = {f'item_{i}': i % 2 == 0 for i in range(120)}
        data = generate_sale_completion_pdf({'stock_id': 'STK-2', 'completion_data': completion}).getvalue()
        assert data.startswith(b'%PDF')
        pages = re.search(rb"/Count (\d+)", data)
        assert pages and int(pages.group(1)) >= 2
