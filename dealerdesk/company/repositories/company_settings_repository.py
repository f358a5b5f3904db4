"""Company Settings Repository — one letterhead row per dealer."""

from ...core.base_repository import DealerScopedRepository


class CompanySettingsRepository(DealerScopedRepository):

    table = 'company_settings'

    EDITABLE = (
        'company_name', 'address_street', 'address_city', 'address_county',
        'address_post_code', 'address_country', 'contact_phone', 'contact_email',
        'contact_website', 'vat_number', 'registration_number',
    )

    def get(self):
        return self.find_one()

    def upsert(self, fields):
        """Create the dealer's settings row or update the given fields on it."""
        data = {k: v for k, v in fields.items() if k in self.EDITABLE}
        if self.get():
            return self.update_where(data, [], []) if data else self.get()
        return self.insert(data)
