from datetime import datetime, timedelta, timezone

from storefront.models import SessionRecord
from storefront.extensions import db
from storefront.utils import utcnow

COOKIE = 'storefront_sid'


def store(app):
    return app.extensions['session_store']


def test_store_create_resolve_destroy(app, user):
    sessions = store(app)
    sid = sessions.create(user.id)

    assert sessions.resolve(sid) == user.id
    assert sessions.destroy(sid) is True
    assert sessions.resolve(sid) is None
    assert sessions.destroy(sid) is False


def test_store_expires_idle_sessions(app, user):
    sessions = store(app)
    sid = sessions.create(user.id)
    record = SessionRecord.query.filter_by(sid=sid).one()
    record.expires_at = utcnow() - timedelta(seconds=1)
    db.session.commit()

    assert sessions.resolve(sid) is None
    assert SessionRecord.query.filter_by(sid=sid).count() == 0


def test_store_touch_extends_expiry(app, user):
    sessions = store(app)
    sid = sessions.create(user.id)
    record = SessionRecord.query.filter_by(sid=sid).one()
    record.expires_at = utcnow() + timedelta(minutes=1)
    db.session.commit()

    assert sessions.touch(sid) is True
    record = SessionRecord.query.filter_by(sid=sid).one()
    assert record.expires_at > utcnow() + timedelta(minutes=29)


def test_purge_expired(app, user):
    sessions = store(app)
    live = sessions.create(user.id)
    stale = sessions.create(user.id)
    SessionRecord.query.filter_by(sid=stale).one().expires_at = utcnow() - timedelta(minutes=1)
    db.session.commit()

    assert sessions.purge_expired() == 1
    assert sessions.resolve(live) == user.id


def test_cookie_holds_only_opaque_id(api, client, user):
    r = api.login(user.email)
    cookie = r.headers['Set-Cookie']
    assert cookie.startswith(f'{COOKIE}=')
    assert 'HttpOnly' in cookie
    assert 'SameSite=Lax' in cookie
    assert 'Max-Age=1800' in cookie

    sid = client.get_cookie(COOKIE).value
    assert len(sid) >= 32
    assert store(client.application).resolve(sid) == user.id


def test_login_rotates_session_id(api, client, user):
    api.refresh_csrf()
    anonymous_sid = client.get_cookie(COOKIE).value

    api.login(user.email)
    assert client.get_cookie(COOKIE).value != anonymous_sid
    assert SessionRecord.query.filter_by(sid=anonymous_sid).count() == 0


def test_requests_roll_the_idle_window(api, client, user):
    api.login(user.email)
    sid = client.get_cookie(COOKIE).value
    record = SessionRecord.query.filter_by(sid=sid).one()
    record.expires_at = utcnow() + timedelta(minutes=1)
    db.session.commit()

    assert api.get('/api/auth/verify').status_code == 200
    record = SessionRecord.query.filter_by(sid=sid).one()
    assert record.expires_at > utcnow() + timedelta(minutes=29)


def test_expired_session_is_unauthenticated(api, client, user):
    api.login(user.email)
    sid = client.get_cookie(COOKIE).value
    SessionRecord.query.filter_by(sid=sid).one().expires_at = utcnow() - timedelta(seconds=1)
    db.session.commit()

    r = api.get('/api/auth/verify')
    assert r.status_code == 401
    assert client.get_cookie(COOKIE) is None


def test_anonymous_reads_do_not_create_sessions(client, products):
    client.get('/api/products')
    assert client.get_cookie(COOKIE) is None
    assert SessionRecord.query.count() == 0


def test_deleting_user_removes_their_sessions(app, user):
    sessions = store(app)
    sid = sessions.create(user.id)
    db.session.delete(user)
    db.session.commit()

    assert sessions.resolve(sid) is None


def test_utcnow_is_naive_utc():
    now = utcnow()
    assert now.tzinfo is None
    assert abs(now - datetime.now(timezone.utc).replace(tzinfo=None)) < timedelta(seconds=5)


def _expire(sid):
    SessionRecord.query.filter_by(sid=sid).one().expires_at = utcnow() - timedelta(minutes=1)
    db.session.commit()


def test_purge_sessions_command(app, user):
    sessions = store(app)
    live = sessions.create(user.id)
    _expire(sessions.create())
    _expire(sessions.create(user.id))

    result = app.test_cli_runner().invoke(args=['purge-sessions'])
    assert result.exit_code == 0
    assert 'Purged 2 expired sessions' in result.output
    assert SessionRecord.query.count() == 1
    assert sessions.resolve(live) == user.id


def test_abandoned_sessions_are_purged_when_new_ones_start(app, client):
    sessions = store(app)
    sessions.purge_interval = 0
    # Anonymous visitors that fetched a token and never came back
    _expire(sessions.create(data={'csrf_token': 'abc'}))
    _expire(sessions.create(data={'csrf_token': 'def'}))

    client.get('/api/csrf-token')

    records = SessionRecord.query.all()
    assert len(records) == 1
    assert records[0].sid == client.get_cookie(COOKIE).value


def test_purge_runs_at_most_once_per_interval(app, client):
    sessions = store(app)
    sessions.purge_interval = 3600
    sessions.purge_if_due()
    _expire(sessions.create(data={'csrf_token': 'abc'}))

    client.get('/api/csrf-token')
    assert SessionRecord.query.count() == 2
