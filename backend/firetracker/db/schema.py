"""Database schema definitions, grouped by the migration step that introduces them."""

# --- Step 1: initial schema -------------------------------------------------

FIREFIGHTERS_TABLE = """
CREATE TABLE IF NOT EXISTS firefighters (
    badge TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT UNIQUE,
    rank TEXT DEFAULT 'Firefighter',
    station TEXT,
    phone TEXT,
    hire_date TEXT,
    status TEXT DEFAULT 'active',
    certifications TEXT,
    vacation_days_total INTEGER DEFAULT 11,
    vacation_days_used INTEGER DEFAULT 0,
    pin_hash TEXT,
    pin_reset_at TEXT,
    pin_reset_by TEXT,
    account_locked INTEGER DEFAULT 0,
    failed_attempts INTEGER DEFAULT 0,
    last_failed_attempt TEXT,
    emergency_contact_name TEXT,
    emergency_contact_phone TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
)
"""

INCIDENTS_TABLE = """
CREATE TABLE IF NOT EXISTS incidents (
    id TEXT PRIMARY KEY,
    location TEXT NOT NULL,
    incident_type TEXT NOT NULL,
    description TEXT,
    priority TEXT DEFAULT 'Medium',
    time TEXT DEFAULT CURRENT_TIMESTAMP,
    active INTEGER DEFAULT 1,
    closed_reason TEXT,
    closed_by_badge TEXT,
    closed_by_station TEXT,
    created_by TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
)
"""

ATTENDEES_TABLE = """
CREATE TABLE IF NOT EXISTS attendees (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    incident_id TEXT,
    badge TEXT,
    name TEXT,
    station TEXT,
    apparatus TEXT,
    role TEXT,
    check_in_time TEXT DEFAULT CURRENT_TIMESTAMP,
    check_out_time TEXT,
    flagged INTEGER DEFAULT 0,
    flag_reason TEXT,
    pay_code TEXT,
    hours_worked REAL,
    FOREIGN KEY (incident_id) REFERENCES incidents (id),
    FOREIGN KEY (badge) REFERENCES firefighters (badge)
)
"""

EVENTS_TABLE = """
CREATE TABLE IF NOT EXISTS events (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    event_name TEXT NOT NULL,
    event_type TEXT NOT NULL,
    activity_category TEXT,
    location TEXT,
    start_date TEXT NOT NULL,
    end_date TEXT,
    description TEXT,
    instructor TEXT,
    max_attendees INTEGER,
    status TEXT DEFAULT 'pending',
    created_by TEXT,
    created_by_badge TEXT,
    active INTEGER DEFAULT 1,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
)
"""

EVENT_ATTENDEES_TABLE = """
CREATE TABLE IF NOT EXISTS event_attendees (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    event_id INTEGER,
    badge TEXT,
    name TEXT,
    station TEXT,
    attendance_type TEXT,
    check_in_time TEXT DEFAULT CURRENT_TIMESTAMP,
    check_out_time TEXT,
    hours_worked REAL,
    approved_hours REAL,
    notes TEXT,
    pay_code TEXT,
    FOREIGN KEY (event_id) REFERENCES events (id),
    FOREIGN KEY (badge) REFERENCES firefighters (badge)
)
"""

STATIONS_TABLE = """
CREATE TABLE IF NOT EXISTS stations (
    name TEXT PRIMARY KEY,
    address TEXT,
    phone TEXT,
    email TEXT,
    chief_badge TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
)
"""

STATION_ACCOUNTS_TABLE = """
CREATE TABLE IF NOT EXISTS station_accounts (
    station_name TEXT PRIMARY KEY,
    password TEXT NOT NULL,
    last_login TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
)
"""

ACTIVITY_CATEGORIES_TABLE = """
CREATE TABLE IF NOT EXISTS activity_categories (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    category_name TEXT UNIQUE,
    description TEXT,
    requires_approval INTEGER DEFAULT 1,
    default_hours REAL,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
)
"""

INITIAL_TABLES = [
    FIREFIGHTERS_TABLE,
    INCIDENTS_TABLE,
    ATTENDEES_TABLE,
    EVENTS_TABLE,
    EVENT_ATTENDEES_TABLE,
    STATIONS_TABLE,
    STATION_ACCOUNTS_TABLE,
    ACTIVITY_CATEGORIES_TABLE,
]

# --- Step 2: authentication --------------------------------------------------

# Stores created before PINs existed lack these columns.
CREDENTIAL_COLUMNS = [
    "ALTER TABLE firefighters ADD COLUMN pin_hash TEXT",
    "ALTER TABLE firefighters ADD COLUMN pin_reset_at TEXT",
    "ALTER TABLE firefighters ADD COLUMN pin_reset_by TEXT",
    "ALTER TABLE firefighters ADD COLUMN account_locked INTEGER DEFAULT 0",
    "ALTER TABLE firefighters ADD COLUMN failed_attempts INTEGER DEFAULT 0",
    "ALTER TABLE firefighters ADD COLUMN last_failed_attempt TEXT",
]

AUTH_LOGS_TABLE = """
CREATE TABLE IF NOT EXISTS auth_logs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    badge TEXT,
    attempt_time TEXT DEFAULT CURRENT_TIMESTAMP,
    success INTEGER,
    ip_address TEXT,
    user_agent TEXT,
    failure_reason TEXT
)
"""

PIN_RESET_LOGS_TABLE = """
CREATE TABLE IF NOT EXISTS pin_reset_logs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    badge TEXT,
    reset_by TEXT,
    reset_reason TEXT,
    reset_time TEXT DEFAULT CURRENT_TIMESTAMP,
    reset_type TEXT
)
"""

AUTH_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_auth_logs_badge ON auth_logs(badge)",
    "CREATE INDEX IF NOT EXISTS idx_auth_logs_attempt_time ON auth_logs(attempt_time)",
    "CREATE INDEX IF NOT EXISTS idx_pin_reset_logs_badge ON pin_reset_logs(badge)",
]

# --- Step 3: enterprise features --------------------------------------------

SETTINGS_TABLE = """
CREATE TABLE IF NOT EXISTS settings (
    key TEXT PRIMARY KEY,
    value TEXT,
    description TEXT,
    category TEXT,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP,
    updated_by TEXT
)
"""

AUDIT_LOG_TABLE = """
CREATE TABLE IF NOT EXISTS audit_log (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_badge TEXT,
    action TEXT,
    table_name TEXT,
    record_id TEXT,
    old_values TEXT,
    new_values TEXT,
    ip_address TEXT,
    user_agent TEXT,
    timestamp TEXT DEFAULT CURRENT_TIMESTAMP
)
"""

APPARATUS_TABLE = """
CREATE TABLE IF NOT EXISTS apparatus (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    apparatus_name TEXT NOT NULL,
    apparatus_type TEXT NOT NULL,
    station TEXT,
    status TEXT DEFAULT 'in_service',
    year INTEGER,
    make TEXT,
    model TEXT,
    vin TEXT,
    mileage INTEGER,
    pump_capacity INTEGER,
    tank_capacity INTEGER,
    ladder_length INTEGER,
    last_inspection TEXT,
    next_inspection_due TEXT,
    maintenance_notes TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (station) REFERENCES stations (name)
)
"""

MAINTENANCE_LOGS_TABLE = """
CREATE TABLE IF NOT EXISTS maintenance_logs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    apparatus_id INTEGER,
    badge TEXT,
    maintenance_type TEXT,
    description TEXT,
    labor_hours REAL,
    cost REAL,
    completed_at TEXT DEFAULT CURRENT_TIMESTAMP,
    next_due_date TEXT,
    FOREIGN KEY (apparatus_id) REFERENCES apparatus (id),
    FOREIGN KEY (badge) REFERENCES firefighters (badge)
)
"""

ENTERPRISE_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_firefighters_station ON firefighters(station)",
    "CREATE INDEX IF NOT EXISTS idx_firefighters_status ON firefighters(status)",
    "CREATE INDEX IF NOT EXISTS idx_incidents_created_at ON incidents(created_at DESC)",
    "CREATE INDEX IF NOT EXISTS idx_attendees_incident ON attendees(incident_id)",
    "CREATE INDEX IF NOT EXISTS idx_events_start_date ON events(start_date DESC)",
    "CREATE INDEX IF NOT EXISTS idx_event_attendees_event ON event_attendees(event_id)",
    "CREATE INDEX IF NOT EXISTS idx_audit_log_timestamp ON audit_log(timestamp)",
    "CREATE INDEX IF NOT EXISTS idx_apparatus_station ON apparatus(station)",
]


def script(*parts) -> str:
    """Join statements and statement lists into one semicolon-separated script"""
    statements = []
    for part in parts:
        if isinstance(part, (list, tuple)):
            statements.extend(part)
        else:
            statements.append(part)
    return ";\n".join(stmt.strip() for stmt in statements) + ";"
