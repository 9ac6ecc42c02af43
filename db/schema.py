from __future__ import annotations

import sqlite3


_NOW = "(strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))"


def bootstrap(conn: sqlite3.Connection) -> None:
    """Create catalog schema and indexes (idempotent).

    Array columns (categories, technologies, siccodes) and JSON blobs are stored as JSON text.
    """
    cur = conn.cursor()

    # Shared companies catalog
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS companies (\n"
            "  company_id TEXT PRIMARY KEY,\n"
            "  legal_name TEXT,\n"
            "  display_name TEXT,\n"
            "  domain TEXT,\n"
            "  website_url TEXT,\n"
            "  linkedin_url TEXT,\n"
            "  type TEXT,\n"
            "  description TEXT,\n"
            "  logo TEXT,\n"
            "  country TEXT,\n"
            "  region TEXT,\n"
            "  address TEXT,\n"
            "  postal_code TEXT,\n"
            "  email TEXT,\n"
            "  phone TEXT,\n"
            "  latitude REAL,\n"
            "  longitude REAL,\n"
            "  revenue REAL,\n"
            "  capitalization REAL,\n"
            "  currency_code TEXT,\n"
            "  employees INTEGER,\n"
            "  siccodes TEXT,\n"
            "  categories TEXT,\n"
            "  technologies TEXT,\n"
            "  social_links TEXT,\n"
            f"  fetched_at TEXT NOT NULL DEFAULT {_NOW},\n"
            f"  created_at TEXT NOT NULL DEFAULT {_NOW},\n"
            f"  updated_at TEXT NOT NULL DEFAULT {_NOW}\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_companies_domain ON companies(domain);")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_companies_country ON companies(country);")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_companies_created_at ON companies(created_at);")

    # Tenants and their members
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS customers (\n"
            "  customer_id TEXT PRIMARY KEY,\n"
            "  name TEXT NOT NULL,\n"
            f"  created_at TEXT NOT NULL DEFAULT {_NOW}\n"
            ")"
        )
    )
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS tenant_members (\n"
            "  user_id TEXT PRIMARY KEY,\n"
            "  customer_id TEXT NOT NULL,\n"
            f"  created_at TEXT NOT NULL DEFAULT {_NOW},\n"
            "  FOREIGN KEY(customer_id) REFERENCES customers(customer_id) ON DELETE CASCADE\n"
            ")"
        )
    )

    # Per-tenant overlay: membership in the tenant catalog plus scoring and overrides
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS customer_companies (\n"
            "  id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
            "  customer_id TEXT NOT NULL,\n"
            "  company_id TEXT NOT NULL,\n"
            "  name TEXT,\n"
            "  categories TEXT,\n"
            "  revenue REAL,\n"
            "  country TEXT,\n"
            "  region TEXT,\n"
            "  employees INTEGER,\n"
            "  last_scoring_results TEXT,\n"
            f"  created_at TEXT NOT NULL DEFAULT {_NOW},\n"
            f"  updated_at TEXT NOT NULL DEFAULT {_NOW},\n"
            "  UNIQUE(customer_id, company_id),\n"
            "  FOREIGN KEY(customer_id) REFERENCES customers(customer_id) ON DELETE CASCADE,\n"
            "  FOREIGN KEY(company_id) REFERENCES companies(company_id) ON DELETE CASCADE\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_customer_companies_company ON customer_companies(company_id);")

    # Company lists (segments, static lists)
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS lists (\n"
            "  list_id TEXT PRIMARY KEY,\n"
            "  customer_id TEXT NOT NULL,\n"
            "  name TEXT NOT NULL,\n"
            "  description TEXT,\n"
            "  is_static INTEGER NOT NULL DEFAULT 0,\n"
            f"  created_at TEXT NOT NULL DEFAULT {_NOW},\n"
            f"  updated_at TEXT NOT NULL DEFAULT {_NOW},\n"
            "  deleted_at TEXT,\n"
            "  FOREIGN KEY(customer_id) REFERENCES customers(customer_id) ON DELETE CASCADE\n"
            ")"
        )
    )
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS list_companies (\n"
            "  id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
            "  company_id TEXT NOT NULL,\n"
            "  list_id TEXT NOT NULL,\n"
            f"  created_at TEXT NOT NULL DEFAULT {_NOW},\n"
            "  UNIQUE(list_id, company_id),\n"
            "  FOREIGN KEY(company_id) REFERENCES companies(company_id) ON DELETE CASCADE,\n"
            "  FOREIGN KEY(list_id) REFERENCES lists(list_id) ON DELETE CASCADE\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_list_companies_company ON list_companies(company_id);")

    # Auxiliary provider payloads
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS company_metadata (\n"
            "  id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
            "  company_id TEXT NOT NULL,\n"
            "  diffbot_json TEXT,\n"
            f"  created_at TEXT NOT NULL DEFAULT {_NOW},\n"
            f"  updated_at TEXT NOT NULL DEFAULT {_NOW},\n"
            "  FOREIGN KEY(company_id) REFERENCES companies(company_id) ON DELETE CASCADE\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_company_metadata_company ON company_metadata(company_id, updated_at);")

    conn.commit()
