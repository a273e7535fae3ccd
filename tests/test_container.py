from leave_attendance.container import build_container


def _db(name):
    return {"host": "db.local", "port": 3306, "user": "app", "password": "secret", "database": name}


def test_each_container_gets_its_own_connection_factory():
    first = build_container(db_config=_db("leave_attendance_a"))
    second = build_container(db_config=_db("leave_attendance_b"))

    assert first.conn is not second.conn
    assert first.conn.config.database == "leave_attendance_a"
    assert second.conn.config.database == "leave_attendance_b"
