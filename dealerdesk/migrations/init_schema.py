"""Database schema initialization.

Contains the CREATE EXTENSION, CREATE TABLE and CREATE INDEX statements
for the DealerDesk database. Every statement is guarded with IF NOT EXISTS
so create_schema() can run against an existing database.

Run out-of-band by scripts/run_migrations.py, never on import.
"""

SCHEMA_STATEMENTS = [
    'CREATE EXTENSION IF NOT EXISTS pgcrypto',

    # Tenants, keyed by the identity provider's user id
    '''
    CREATE TABLE IF NOT EXISTS dealers (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        identity_user_id VARCHAR(255) NOT NULL UNIQUE,
        name VARCHAR(255) NOT NULL,
        email VARCHAR(255) NOT NULL UNIQUE,
        role VARCHAR(50) NOT NULL DEFAULT 'dealer',
        metadata JSONB,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    ''',

    '''
    CREATE TABLE IF NOT EXISTS customers (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        dealer_id UUID NOT NULL REFERENCES dealers(id) ON DELETE CASCADE,
        first_name VARCHAR(100) NOT NULL,
        last_name VARCHAR(100) NOT NULL,
        email VARCHAR(255),
        phone VARCHAR(50),
        date_of_birth DATE,
        address_line_1 VARCHAR(255),
        address_line_2 VARCHAR(255),
        city VARCHAR(100),
        county VARCHAR(100),
        postcode VARCHAR(20),
        country VARCHAR(100) DEFAULT 'United Kingdom',
        marketing_consent BOOLEAN DEFAULT FALSE,
        sales_consent BOOLEAN DEFAULT FALSE,
        gdpr_consent BOOLEAN DEFAULT FALSE,
        consent_date TIMESTAMPTZ,
        notes TEXT,
        customer_source VARCHAR(100),
        preferred_contact_method VARCHAR(20) DEFAULT 'email',
        enquiry_type VARCHAR(100),
        status VARCHAR(20) NOT NULL DEFAULT 'active',
        tags JSONB,
        custom_fields JSONB,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    ''',
    'CREATE INDEX IF NOT EXISTS idx_customers_dealer_id ON customers(dealer_id)',
    'CREATE INDEX IF NOT EXISTS idx_customers_email ON customers(email)',
    'CREATE INDEX IF NOT EXISTS idx_customers_status ON customers(status)',

    '''
    CREATE TABLE IF NOT EXISTS test_drive_entries (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        dealer_id UUID NOT NULL REFERENCES dealers(id) ON DELETE CASCADE,
        vehicle_registration VARCHAR(20) NOT NULL,
        vehicle_make VARCHAR(100),
        vehicle_model VARCHAR(100),
        vehicle_year INTEGER,
        test_drive_date DATE NOT NULL DEFAULT CURRENT_DATE,
        test_drive_time VARCHAR(5) NOT NULL DEFAULT '09:00',
        estimated_duration INTEGER NOT NULL DEFAULT 30,
        customer_name VARCHAR(255),
        customer_email VARCHAR(255),
        customer_phone VARCHAR(50),
        address_same_as_id VARCHAR(3) NOT NULL,
        address_line_1 VARCHAR(255),
        address_line_2 VARCHAR(255),
        city VARCHAR(100),
        county VARCHAR(100),
        postcode VARCHAR(20),
        country VARCHAR(100) DEFAULT 'United Kingdom',
        driving_license_file TEXT,
        status VARCHAR(20) NOT NULL DEFAULT 'scheduled',
        notes TEXT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    ''',
    'CREATE INDEX IF NOT EXISTS idx_test_drives_dealer_id ON test_drive_entries(dealer_id)',
    'CREATE INDEX IF NOT EXISTS idx_test_drives_status ON test_drive_entries(status)',
    'CREATE INDEX IF NOT EXISTS idx_test_drives_date ON test_drive_entries(test_drive_date)',
    'CREATE INDEX IF NOT EXISTS idx_test_drives_customer_email ON test_drive_entries(customer_email)',

    '''
    CREATE TABLE IF NOT EXISTS vehicle_costs (
        id SERIAL PRIMARY KEY,
        stock_id VARCHAR(255) NOT NULL,
        dealer_id UUID NOT NULL REFERENCES dealers(id) ON DELETE CASCADE,
        stock_reference VARCHAR(255),
        registration VARCHAR(20),
        transport_in NUMERIC(10,2),
        transport_out NUMERIC(10,2),
        mot NUMERIC(10,2),
        ex_vat_costs JSONB,
        inc_vat_costs JSONB,
        fixed_costs_total NUMERIC(10,2) DEFAULT 0,
        ex_vat_costs_total NUMERIC(10,2) DEFAULT 0,
        inc_vat_costs_total NUMERIC(10,2) DEFAULT 0,
        grand_total NUMERIC(10,2) DEFAULT 0,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    ''',
    'CREATE INDEX IF NOT EXISTS idx_vehicle_costs_stock_id ON vehicle_costs(stock_id)',
    'CREATE INDEX IF NOT EXISTS idx_vehicle_costs_dealer_id ON vehicle_costs(dealer_id)',

    '''
    CREATE TABLE IF NOT EXISTS return_costs (
        id SERIAL PRIMARY KEY,
        stock_id VARCHAR(255) NOT NULL,
        dealer_id UUID NOT NULL REFERENCES dealers(id) ON DELETE CASCADE,
        stock_reference VARCHAR(255),
        registration VARCHAR(20),
        vatable_costs JSONB NOT NULL DEFAULT '[]'::jsonb,
        non_vatable_costs JSONB NOT NULL DEFAULT '[]'::jsonb,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    ''',
    'CREATE INDEX IF NOT EXISTS idx_return_costs_stock_id ON return_costs(stock_id)',
    'CREATE INDEX IF NOT EXISTS idx_return_costs_dealer_id ON return_costs(dealer_id)',

    '''
    CREATE TABLE IF NOT EXISTS company_settings (
        id SERIAL PRIMARY KEY,
        dealer_id UUID NOT NULL UNIQUE REFERENCES dealers(id) ON DELETE CASCADE,
        company_name VARCHAR(255),
        address_street VARCHAR(255),
        address_city VARCHAR(100),
        address_county VARCHAR(100),
        address_post_code VARCHAR(20),
        address_country VARCHAR(100) DEFAULT 'United Kingdom',
        contact_phone VARCHAR(50),
        contact_email VARCHAR(255),
        contact_website VARCHAR(255),
        vat_number VARCHAR(50),
        registration_number VARCHAR(50),
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    ''',

    '''
    CREATE TABLE IF NOT EXISTS schema_migrations (
        version VARCHAR(255) PRIMARY KEY,
        applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    ''',
]


def create_schema(conn, cursor):
    """Create all database tables and indexes.

    Args:
        conn: Database connection (for commit)
        cursor: Database cursor from get_cursor(conn)

    Returns:
        Number of statements executed
    """
    for statement in SCHEMA_STATEMENTS:
        cursor.execute(statement)
    conn.commit()
    return len(SCHEMA_STATEMENTS)
