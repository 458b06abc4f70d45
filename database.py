import json
import sqlite3
from pathlib import Path

from config import DB_PATH


def get_connection():
    db_file = Path(DB_PATH)
    db_file.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_file))
    conn.row_factory = sqlite3.Row
    return conn


def create_tables(conn):
    cursor = conn.cursor()

    cursor.execute(
        """
        CREATE TABLE IF NOT EXISTS User (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            email TEXT,
            role TEXT NOT NULL DEFAULT 'patient',
            created_at TEXT NOT NULL
        )
        """
    )

    cursor.execute(
        """
        CREATE TABLE IF NOT EXISTS Assessment (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL,
            risk_factor_score REAL NOT NULL,
            symptom_score REAL NOT NULL,
            total_score INTEGER NOT NULL,
            risk_level TEXT NOT NULL,
            explanations TEXT NOT NULL,
            recommendations TEXT NOT NULL,
            timestamp TEXT NOT NULL,
            FOREIGN KEY (user_id) REFERENCES User (id)
        )
        """
    )

    cursor.execute(
        """
        CREATE TABLE IF NOT EXISTS Appointment (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            patient_id INTEGER NOT NULL,
            doctor_id INTEGER NOT NULL,
            date TEXT NOT NULL,
            time TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'pending',
            reason TEXT NOT NULL,
            created_at TEXT NOT NULL,
            FOREIGN KEY (patient_id) REFERENCES User (id),
            FOREIGN KEY (doctor_id) REFERENCES User (id)
        )
        """
    )

    cursor.execute(
        """
        CREATE TABLE IF NOT EXISTS ChatSession (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY (user_id) REFERENCES User (id)
        )
        """
    )

    cursor.execute(
        """
        CREATE TABLE IF NOT EXISTS ChatMessage (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            session_id INTEGER NOT NULL,
            role TEXT NOT NULL,
            content TEXT NOT NULL,
            created_at TEXT NOT NULL,
            FOREIGN KEY (session_id) REFERENCES ChatSession (id)
        )
        """
    )

    cursor.execute(
        """
        CREATE TABLE IF NOT EXISTS ForumPost (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER,
            author_name TEXT NOT NULL,
            author_role TEXT NOT NULL,
            is_anonymous INTEGER NOT NULL DEFAULT 0,
            topic TEXT NOT NULL,
            title TEXT NOT NULL,
            content TEXT NOT NULL,
            tags TEXT NOT NULL DEFAULT '[]',
            created_at TEXT NOT NULL,
            FOREIGN KEY (user_id) REFERENCES User (id)
        )
        """
    )

    cursor.execute(
        """
        CREATE TABLE IF NOT EXISTS ForumReply (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            post_id INTEGER NOT NULL,
            user_id INTEGER,
            author_name TEXT NOT NULL,
            is_anonymous INTEGER NOT NULL DEFAULT 0,
            content TEXT NOT NULL,
            created_at TEXT NOT NULL,
            FOREIGN KEY (post_id) REFERENCES ForumPost (id),
            FOREIGN KEY (user_id) REFERENCES User (id)
        )
        """
    )

    conn.commit()


def _add_column_if_missing(conn, table_name, column_name, column_ddl):
    cursor = conn.cursor()
    cursor.execute(f"PRAGMA table_info({table_name})")
    rows = [dict(row) for row in cursor.fetchall()]
    existing_columns = {row["name"] for row in rows}

    if column_name not in existing_columns:
        cursor.execute(f"ALTER TABLE {table_name} ADD COLUMN {column_name} {column_ddl}")


def migrate_schema(conn):
    # Safe, additive migrations only.
    _add_column_if_missing(conn, "User", "avatar", "TEXT")
    _add_column_if_missing(conn, "Assessment", "answers", "TEXT")
    _add_column_if_missing(conn, "Appointment", "notes", "TEXT")

    # One live booking per doctor slot.
    conn.execute(
        """
        CREATE UNIQUE INDEX IF NOT EXISTS idx_appointment_live_slot
        ON Appointment (doctor_id, date, time)
        WHERE status != 'cancelled'
        """
    )

    conn.commit()


def seed_users(conn):
    cursor = conn.cursor()
    cursor.execute("SELECT COUNT(*) AS count FROM User")
    if cursor.fetchone()["count"] > 0:
        return False

    users = [
        ("Priya Sharma", "priya@example.com", "patient", "2026-01-15T00:00:00"),
        ("Anita Desai", "anita@example.com", "patient", "2026-01-20T00:00:00"),
        ("Meera Joshi", "meera@example.com", "patient", "2026-02-01T00:00:00"),
        ("Kavita Rao", "kavita@example.com", "patient", "2026-02-05T00:00:00"),
        ("Dr. Rekha Menon", "rekha@clinic.com", "doctor", "2025-06-01T00:00:00"),
        ("Dr. Sunita Patel", "sunita@clinic.com", "doctor", "2025-06-01T00:00:00"),
        ("Hope Foundation", "ngo@hope.org", "volunteer", "2025-09-01T00:00:00"),
        ("Admin User", "admin@platform.com", "admin", "2025-01-01T00:00:00"),
    ]
    cursor.executemany(
        "INSERT INTO User (name, email, role, created_at) VALUES (?, ?, ?, ?)",
        users,
    )
    conn.commit()
    return True


def _user_ids_by_email(conn):
    cursor = conn.cursor()
    cursor.execute("SELECT id, email FROM User")
    return {row["email"]: row["id"] for row in cursor.fetchall()}


def seed_assessments(conn, ids):
    assessments = [
        (
            ids["priya@example.com"], 22, 12, 16, "low",
            [
                "Risk Factor Score: 22/100 (contributes 40% to total)",
                "Symptom Score: 12/100 (contributes 60% to total)",
                "Overall Score: 16/100 → LOW risk",
            ],
            [
                "Continue routine screening as recommended for your age group.",
                "Perform monthly breast self-examinations (BSE).",
            ],
            "2026-02-08T10:00:00+00:00",
        ),
        (
            ids["anita@example.com"], 55, 45, 49, "moderate",
            [
                "Risk Factor Score: 55/100 (contributes 40% to total)",
                "Symptom Score: 45/100 (contributes 60% to total)",
                "Overall Score: 49/100 → MODERATE risk",
            ],
            [
                "Schedule a clinical breast examination with your healthcare provider.",
                "Discuss your risk factors with a doctor to determine screening intervals.",
            ],
            "2026-02-07T14:30:00+00:00",
        ),
        (
            ids["meera@example.com"], 70, 75, 73, "high",
            [
                "Risk Factor Score: 70/100 (contributes 40% to total)",
                "Symptom Score: 75/100 (contributes 60% to total)",
                "Overall Score: 73/100 → HIGH risk",
            ],
            [
                "Please consult a healthcare professional as soon as possible.",
                "Request a clinical breast exam and discuss diagnostic imaging.",
                "Ask your doctor about genetic counseling.",
            ],
            "2026-02-06T09:15:00+00:00",
        ),
        (
            ids["kavita@example.com"], 35, 20, 26, "low",
            [
                "Risk Factor Score: 35/100 (contributes 40% to total)",
                "Symptom Score: 20/100 (contributes 60% to total)",
                "Overall Score: 26/100 → LOW risk",
            ],
            [
                "Continue routine screening as recommended for your age group.",
                "Maintain a healthy lifestyle.",
            ],
            "2026-02-09T11:00:00+00:00",
        ),
    ]

    conn.cursor().executemany(
        """
        INSERT INTO Assessment (
            user_id,
            risk_factor_score,
            symptom_score,
            total_score,
            risk_level,
            explanations,
            recommendations,
            timestamp
        )
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [
            (user_id, rf, sx, total, level, json.dumps(explanations), json.dumps(recommendations), ts)
            for user_id, rf, sx, total, level, explanations, recommendations, ts in assessments
        ],
    )
    conn.commit()


def seed_appointments(conn, ids):
    rekha = ids["rekha@clinic.com"]
    sunita = ids["sunita@clinic.com"]
    appointments = [
        (ids["anita@example.com"], rekha, "2026-02-14", "10:00 AM", "confirmed",
         "Follow-up on moderate risk assessment"),
        (ids["meera@example.com"], rekha, "2026-02-12", "2:00 PM", "confirmed",
         "Urgent consultation - high risk assessment"),
        (ids["priya@example.com"], sunita, "2026-02-20", "11:30 AM", "pending",
         "Annual screening discussion"),
    ]
    conn.cursor().executemany(
        """
        INSERT INTO Appointment (patient_id, doctor_id, date, time, status, reason, created_at)
        VALUES (?, ?, ?, ?, ?, ?, '2026-02-01T00:00:00')
        """,
        appointments,
    )
    conn.commit()


def seed_forum(conn, ids):
    cursor = conn.cursor()
    hope = ids["ngo@hope.org"]

    posts = [
        (
            ids["anita@example.com"], "Anonymous", "patient", 1, "Support & Coping",
            "Dealing with anxiety after a moderate risk result",
            "I recently took the self-assessment and received a moderate risk result. "
            "I know it's not a diagnosis, but I feel anxious. Has anyone else been through this?",
            ["anxiety", "moderate-risk", "support"],
            "2026-02-08T18:00:00+00:00",
            [
                (hope, "Hope Foundation", 0,
                 "It's completely normal to feel anxious. Moderate risk means monitoring, not diagnosis.",
                 "2026-02-09T10:00:00+00:00"),
                (ids["kavita@example.com"], "Anonymous", 1,
                 "I went through the same thing last year. Early awareness is power, not fear.",
                 "2026-02-09T11:30:00+00:00"),
            ],
        ),
        (
            ids["priya@example.com"], "Anonymous", "patient", 1, "Breast Self-Exam",
            "How to do a proper breast self-exam (BSE)?",
            "I keep hearing about BSE but I'm not sure about the correct technique. Can someone guide me?",
            ["bse", "self-exam", "guide"],
            "2026-02-06T15:00:00+00:00",
            [
                (ids["rekha@clinic.com"], "Dr. Rekha Menon", 0,
                 "The best time for BSE is a few days after your period. If you feel anything unusual, "
                 "please schedule a clinical exam.",
                 "2026-02-07T09:00:00+00:00"),
            ],
        ),
        (
            hope, "Hope Foundation", "volunteer", 0, "Community Events",
            "Free screening camp - February 25, Mumbai",
            "We are organizing a free breast cancer screening camp on February 25th, 2026. Walk-ins welcome.",
            ["event", "screening", "free"],
            "2026-02-05T12:00:00+00:00",
            [],
        ),
    ]

    for user_id, author, role, anonymous, topic, title, content, tags, created_at, replies in posts:
        cursor.execute(
            """
            INSERT INTO ForumPost (
                user_id, author_name, author_role, is_anonymous, topic, title, content, tags, created_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (user_id, author, role, anonymous, topic, title, content, json.dumps(tags), created_at),
        )
        post_id = cursor.lastrowid
        cursor.executemany(
            """
            INSERT INTO ForumReply (post_id, user_id, author_name, is_anonymous, content, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            [(post_id,) + reply for reply in replies],
        )

    conn.commit()


def seed_demo_data(conn):
    if not seed_users(conn):
        return
    ids = _user_ids_by_email(conn)
    seed_assessments(conn, ids)
    seed_appointments(conn, ids)
    seed_forum(conn, ids)


def init_db():
    conn = get_connection()
    create_tables(conn)
    migrate_schema(conn)
    seed_demo_data(conn)
    conn.close()
