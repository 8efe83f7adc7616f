"""Tests for app.py security features — headers and error handler."""


def test_security_headers_present(client):
    """All security headers should be set on every response."""
    resp = client.get('/')
    assert resp.headers.get('X-Content-Type-Options') == 'nosniff'
    assert resp.headers.get('X-Frame-Options') == 'SAMEORIGIN'
    assert 'Content-Security-Policy' in resp.headers


def test_error_handler_hides_details(app):
    """Error handler should NOT leak exception details to user."""
    @app.route('/test-500')
    def crash():
        raise ValueError('secret database password is xyz123')

    with app.test_client() as c:
        resp = c.get('/test-500')
        assert resp.status_code == 500
        body = resp.data.decode()
        assert 'secret database password' not in body
        assert 'xyz123' not in body
        assert 'Internal Server Error' in body


def test_unknown_route_is_404(client):
    assert client.get('/no-such-page').status_code == 404


def test_wal_mode_set(temp_db):
    """SQLite WAL mode should be enabled."""
    from db.database import get_db
    conn = get_db()
    try:
        result = conn.execute('PRAGMA journal_mode').fetchone()
        assert result[0] == 'wal'
    finally:
        conn.close()


def test_foreign_keys_enabled(temp_db):
    """Foreign keys should be enforced."""
    from db.database import get_db
    conn = get_db()
    try:
        result = conn.execute('PRAGMA foreign_keys').fetchone()
        assert result[0] == 1
    finally:
        conn.close()


def test_schema_tables_exist(temp_db):
    from db.database import query_db
    rows = query_db("SELECT name FROM sqlite_master WHERE type='table'")
    names = {r['name'] for r in rows}
    assert {'questions', 'practice_sessions', 'user_settings', 'wrong_questions'} <= names


def test_init_db_is_idempotent(temp_db):
    from db.database import init_db
    init_db()
    init_db()
