import json

from database import get_connection


def _row_to_dict(row):
    if row is None:
        return None
    return dict(row)


def _rows_to_dicts(rows):
    return [dict(row) for row in rows]


def _decode_assessment(row):
    if row is None:
        return None
    assessment = dict(row)
    assessment["explanations"] = json.loads(assessment["explanations"] or "[]")
    assessment["recommendations"] = json.loads(assessment["recommendations"] or "[]")
    assessment["answers"] = json.loads(assessment.get("answers") or "null")
    return assessment


def _decode_post(row):
    post = dict(row)
    post["tags"] = json.loads(post["tags"] or "[]")
    post["is_anonymous"] = bool(post["is_anonymous"])
    return post


# User model operations

def create_user(name, email, role, created_at):
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        "INSERT INTO User (name, email, role, created_at) VALUES (?, ?, ?, ?)",
        (name, email, role, created_at),
    )
    conn.commit()
    user_id = cursor.lastrowid
    conn.close()
    return user_id


def get_user(user_id):
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute("SELECT * FROM User WHERE id = ?", (user_id,))
    user = _row_to_dict(cursor.fetchone())
    conn.close()
    return user


def list_users(role=None):
    conn = get_connection()
    cursor = conn.cursor()
    if role:
        cursor.execute("SELECT * FROM User WHERE role = ? ORDER BY id ASC", (role,))
    else:
        cursor.execute("SELECT * FROM User ORDER BY id ASC")
    users = _rows_to_dicts(cursor.fetchall())
    conn.close()
    return users


def get_user_counts(user_id):
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        """
        SELECT
            (SELECT COUNT(*) FROM Assessment WHERE user_id = ?) AS assessments,
            (SELECT COUNT(*) FROM Appointment WHERE patient_id = ? OR doctor_id = ?) AS appointments,
            (SELECT COUNT(*) FROM ChatSession WHERE user_id = ?) AS chat_sessions
        """,
        (user_id, user_id, user_id, user_id),
    )
    counts = _row_to_dict(cursor.fetchone())
    conn.close()
    return counts


def delete_user_data(user_id):
    """Remove everything a user has produced, keeping the User row itself."""
    conn = get_connection()
    try:
        with conn:
            conn.execute(
                """
                DELETE FROM ChatMessage
                WHERE session_id IN (SELECT id FROM ChatSession WHERE user_id = ?)
                """,
                (user_id,),
            )
            conn.execute("DELETE FROM ChatSession WHERE user_id = ?", (user_id,))
            conn.execute("DELETE FROM Assessment WHERE user_id = ?", (user_id,))
            conn.execute("DELETE FROM Appointment WHERE patient_id = ?", (user_id,))
            conn.execute(
                """
                DELETE FROM ForumReply
                WHERE user_id = ? OR post_id IN (SELECT id FROM ForumPost WHERE user_id = ?)
                """,
                (user_id, user_id),
            )
            conn.execute("DELETE FROM ForumPost WHERE user_id = ?", (user_id,))
    finally:
        conn.close()


# Assessment model operations

def create_assessment(
    user_id,
    risk_factor_score,
    symptom_score,
    total_score,
    risk_level,
    explanations,
    recommendations,
    answers,
    timestamp,
):
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        """
        INSERT INTO Assessment (
            user_id,
            risk_factor_score,
            symptom_score,
            total_score,
            risk_level,
            explanations,
            recommendations,
            answers,
            timestamp
        )
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            user_id,
            risk_factor_score,
            symptom_score,
            total_score,
            risk_level,
            json.dumps(explanations),
            json.dumps(recommendations),
            json.dumps(answers),
            timestamp,
        ),
    )
    conn.commit()
    assessment_id = cursor.lastrowid
    conn.close()
    return assessment_id


def get_assessments_for_user(user_id):
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        "SELECT * FROM Assessment WHERE user_id = ? ORDER BY timestamp DESC, id DESC",
        (user_id,),
    )
    assessments = [_decode_assessment(row) for row in cursor.fetchall()]
    conn.close()
    return assessments


def get_latest_assessment(user_id):
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        "SELECT * FROM Assessment WHERE user_id = ? ORDER BY timestamp DESC, id DESC LIMIT 1",
        (user_id,),
    )
    assessment = _decode_assessment(cursor.fetchone())
    conn.close()
    return assessment


def list_recent_assessments(limit=10):
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        """
        SELECT a.id, a.user_id, a.total_score, a.risk_level, a.timestamp, u.name AS user_name
        FROM Assessment a
        LEFT JOIN User u ON u.id = a.user_id
        ORDER BY a.timestamp DESC, a.id DESC
        LIMIT ?
        """,
        (limit,),
    )
    rows = _rows_to_dicts(cursor.fetchall())
    conn.close()
    return rows


def count_assessments_by_level():
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        "SELECT risk_level, COUNT(*) AS count FROM Assessment GROUP BY risk_level ORDER BY risk_level"
    )
    rows = _rows_to_dicts(cursor.fetchall())
    conn.close()
    return rows


# Appointment model operations

_APPOINTMENT_SELECT = """
    SELECT a.*, p.name AS patient_name, d.name AS doctor_name
    FROM Appointment a
    LEFT JOIN User p ON p.id = a.patient_id
    LEFT JOIN User d ON d.id = a.doctor_id
"""


def create_appointment(patient_id, doctor_id, date, time, reason, notes, status, created_at):
    conn = get_connection()
    try:
        cursor = conn.cursor()
        cursor.execute(
            """
            INSERT INTO Appointment (patient_id, doctor_id, date, time, status, reason, notes, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (patient_id, doctor_id, date, time, status, reason, notes, created_at),
        )
        conn.commit()
        return cursor.lastrowid
    finally:
        conn.close()


def get_appointment(appointment_id):
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(_APPOINTMENT_SELECT + " WHERE a.id = ?", (appointment_id,))
    appointment = _row_to_dict(cursor.fetchone())
    conn.close()
    return appointment


def get_appointments_for_user(user_id, status=None):
    conn = get_connection()
    cursor = conn.cursor()
    query = _APPOINTMENT_SELECT + " WHERE (a.patient_id = ? OR a.doctor_id = ?)"
    params = [user_id, user_id]
    if status:
        query += " AND a.status = ?"
        params.append(status)
    query += " ORDER BY a.date DESC, a.id DESC"
    cursor.execute(query, params)
    appointments = _rows_to_dicts(cursor.fetchall())
    conn.close()
    return appointments


def get_appointments_for_patient(patient_id):
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        _APPOINTMENT_SELECT + " WHERE a.patient_id = ? ORDER BY a.date DESC, a.id DESC",
        (patient_id,),
    )
    appointments = _rows_to_dicts(cursor.fetchall())
    conn.close()
    return appointments


def get_booked_times(doctor_id, date):
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        """
        SELECT time FROM Appointment
        WHERE doctor_id = ? AND date = ? AND status != 'cancelled'
        """,
        (doctor_id, date),
    )
    times = {row["time"] for row in cursor.fetchall()}
    conn.close()
    return times


def update_appointment_status(appointment_id, status):
    conn = get_connection()
    try:
        cursor = conn.cursor()
        cursor.execute(
            "UPDATE Appointment SET status = ? WHERE id = ?",
            (status, appointment_id),
        )
        conn.commit()
        return cursor.rowcount > 0
    finally:
        conn.close()


def delete_appointment(appointment_id):
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute("DELETE FROM Appointment WHERE id = ?", (appointment_id,))
    conn.commit()
    deleted = cursor.rowcount > 0
    conn.close()
    return deleted


def count_appointments_by_status():
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        "SELECT status, COUNT(*) AS count FROM Appointment GROUP BY status ORDER BY status"
    )
    rows = _rows_to_dicts(cursor.fetchall())
    conn.close()
    return rows


# Chat model operations

def create_chat_session(user_id, created_at):
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        "INSERT INTO ChatSession (user_id, created_at, updated_at) VALUES (?, ?, ?)",
        (user_id, created_at, created_at),
    )
    conn.commit()
    session_id = cursor.lastrowid
    conn.close()
    return session_id


def get_chat_session(session_id, user_id):
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        "SELECT * FROM ChatSession WHERE id = ? AND user_id = ?",
        (session_id, user_id),
    )
    session = _row_to_dict(cursor.fetchone())
    conn.close()
    return session


def add_chat_messages(session_id, messages, created_at):
    """messages: iterable of (role, content) pairs, stored in order."""
    conn = get_connection()
    cursor = conn.cursor()
    cursor.executemany(
        "INSERT INTO ChatMessage (session_id, role, content, created_at) VALUES (?, ?, ?, ?)",
        [(session_id, role, content, created_at) for role, content in messages],
    )
    cursor.execute(
        "UPDATE ChatSession SET updated_at = ? WHERE id = ?",
        (created_at, session_id),
    )
    conn.commit()
    conn.close()


def get_chat_messages(session_id):
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        "SELECT * FROM ChatMessage WHERE session_id = ? ORDER BY id ASC",
        (session_id,),
    )
    messages = _rows_to_dicts(cursor.fetchall())
    conn.close()
    return messages


def get_chat_sessions_for_user(user_id):
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        "SELECT * FROM ChatSession WHERE user_id = ? ORDER BY updated_at DESC, id DESC",
        (user_id,),
    )
    sessions = _rows_to_dicts(cursor.fetchall())
    conn.close()
    return sessions


# Forum model operations

def create_forum_post(user_id, author_name, author_role, is_anonymous, topic, title, content, tags, created_at):
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        """
        INSERT INTO ForumPost (
            user_id, author_name, author_role, is_anonymous, topic, title, content, tags, created_at
        )
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            user_id,
            author_name,
            author_role,
            1 if is_anonymous else 0,
            topic,
            title,
            content,
            json.dumps(tags),
            created_at,
        ),
    )
    conn.commit()
    post_id = cursor.lastrowid
    conn.close()
    return post_id


def get_forum_post(post_id):
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute("SELECT * FROM ForumPost WHERE id = ?", (post_id,))
    row = cursor.fetchone()
    conn.close()
    return _decode_post(row) if row else None


def list_forum_posts(topic=None):
    conn = get_connection()
    cursor = conn.cursor()
    if topic:
        cursor.execute(
            "SELECT * FROM ForumPost WHERE topic = ? ORDER BY created_at DESC, id DESC",
            (topic,),
        )
    else:
        cursor.execute("SELECT * FROM ForumPost ORDER BY created_at DESC, id DESC")
    posts = [_decode_post(row) for row in cursor.fetchall()]
    conn.close()
    return posts


def add_forum_reply(post_id, user_id, author_name, is_anonymous, content, created_at):
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        """
        INSERT INTO ForumReply (post_id, user_id, author_name, is_anonymous, content, created_at)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (post_id, user_id, author_name, 1 if is_anonymous else 0, content, created_at),
    )
    conn.commit()
    reply_id = cursor.lastrowid
    conn.close()
    return reply_id


def get_forum_replies(post_id):
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        "SELECT * FROM ForumReply WHERE post_id = ? ORDER BY created_at ASC, id ASC",
        (post_id,),
    )
    replies = _rows_to_dicts(cursor.fetchall())
    conn.close()
    for reply in replies:
        reply["is_anonymous"] = bool(reply["is_anonymous"])
    return replies


# Admin model operations

_COUNTABLE_TABLES = {"User", "Assessment", "Appointment", "ChatSession", "ForumPost"}


def count_rows(table_name):
    if table_name not in _COUNTABLE_TABLES:
        raise ValueError(f"Unknown table: {table_name}")
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(f"SELECT COUNT(*) AS count FROM {table_name}")
    count = cursor.fetchone()["count"]
    conn.close()
    return count


def ping():
    conn = get_connection()
    try:
        conn.execute("SELECT 1")
    finally:
        conn.close()
