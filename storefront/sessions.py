"""
Server-side Sessions

The browser only holds an opaque, random session id. The payload (the
authenticated user id set by Flask-Login, the CSRF secret set by
Flask-WTF) lives in the ``sessions`` table and expires after a fixed idle
period that every request pushes forward.
"""

import logging
import secrets
import time
from datetime import timedelta

from flask.json.tag import TaggedJSONSerializer
from flask.sessions import SessionInterface, SessionMixin
from werkzeug.datastructures import CallbackDict

from storefront.extensions import db
from storefront.models import SessionRecord
from storefront.utils import utcnow

logger = logging.getLogger(__name__)

# Key under which Flask-Login keeps the authenticated user id
USER_ID_KEY = '_user_id'


def _new_sid():
    return secrets.token_urlsafe(32)


class ServerSession(CallbackDict, SessionMixin):
    """Session payload bound to a server-side record."""

    def __init__(self, initial=None, sid=None, new=False):
        def on_update(self):
            self.modified = True

        super().__init__(initial, on_update)
        self.sid = sid
        self.new = new
        self.modified = False
        self.rotate_requested = False
        self.stale_cookie = False

    def rotate(self):
        """Issue a fresh id for this payload when the response is saved."""
        self.rotate_requested = True
        self.modified = True


class SessionStore:
    """CRUD over the ``sessions`` table."""

    def __init__(self, idle_timeout, serializer=None, purge_interval=None, clock=time.monotonic):
        self.idle_timeout = idle_timeout
        self.serializer = serializer or TaggedJSONSerializer()
        # Seconds between opportunistic purges; None disables them
        self.purge_interval = purge_interval
        self._clock = clock
        self._last_purge = None

    def _expiry(self):
        return utcnow() + self.idle_timeout

    def _live_record(self, sid):
        if not sid:
            return None
        record = SessionRecord.query.filter_by(sid=sid).first()
        if record is None:
            return None
        if record.expires_at <= utcnow():
            db.session.delete(record)
            db.session.commit()
            return None
        return record

    def create(self, user_id=None, data=None):
        """Persist a new session and return its id."""
        payload = dict(data or {})
        if user_id is not None:
            payload[USER_ID_KEY] = str(user_id)
        sid = _new_sid()
        self.save(sid, payload, new=True)
        return sid

    def load(self, sid):
        """Return the payload of a live session, or None."""
        record = self._live_record(sid)
        if record is None:
            return None
        return self.serializer.loads(record.data)

    def resolve(self, sid):
        """Map a session id to the authenticated user id, or None."""
        record = self._live_record(sid)
        if record is None:
            return None
        return record.user_id

    def save(self, sid, payload, new=False):
        user_id = payload.get(USER_ID_KEY)
        data = self.serializer.dumps(dict(payload))
        expires_at = self._expiry()
        record = None if new else SessionRecord.query.filter_by(sid=sid).first()
        if record is None:
            record = SessionRecord(sid=sid)
            db.session.add(record)
        record.user_id = int(user_id) if user_id is not None else None
        record.data = data
        record.expires_at = expires_at
        db.session.commit()
        return expires_at

    def touch(self, sid):
        """Push the expiry of a live session forward."""
        record = self._live_record(sid)
        if record is None:
            return False
        record.expires_at = self._expiry()
        db.session.commit()
        return True

    def destroy(self, sid):
        """Invalidate a session immediately."""
        deleted = SessionRecord.query.filter_by(sid=sid).delete()
        db.session.commit()
        return bool(deleted)

    def purge_expired(self):
        deleted = SessionRecord.query.filter(
            SessionRecord.expires_at <= utcnow()
        ).delete()
        db.session.commit()
        if deleted:
            logger.info('Purged %d expired sessions', deleted)
        return deleted

    def purge_if_due(self):
        """Run ``purge_expired`` at most once per ``purge_interval`` seconds."""
        if self.purge_interval is None:
            return 0
        now = self._clock()
        if self._last_purge is not None and now - self._last_purge < self.purge_interval:
            return 0
        self._last_purge = now
        return self.purge_expired()


class ServerSessionInterface(SessionInterface):
    """Flask session interface backed by ``SessionStore``."""

    session_class = ServerSession

    def __init__(self, store):
        self.store = store

    def open_session(self, app, request):
        sid = request.cookies.get(self.get_cookie_name(app))
        if sid:
            payload = self.store.load(sid)
            if payload is not None:
                return self.session_class(payload, sid=sid)
        session = self.session_class(sid=_new_sid(), new=True)
        # The browser presented an id we no longer know; make it drop it
        session.stale_cookie = bool(sid)
        return session

    def _delete_cookie(self, app, response):
        response.delete_cookie(
            self.get_cookie_name(app),
            domain=self.get_cookie_domain(app),
            path=self.get_cookie_path(app),
            secure=self.get_cookie_secure(app),
            httponly=self.get_cookie_httponly(app),
            samesite=self.get_cookie_samesite(app),
        )

    def save_session(self, app, session, response):
        if not session:
            if not session.new and session.modified:
                self.store.destroy(session.sid)
                self._delete_cookie(app, response)
            elif session.stale_cookie:
                self._delete_cookie(app, response)
            return

        if session.rotate_requested and not session.new:
            self.store.destroy(session.sid)
            session.sid = _new_sid()
            session.new = True
        session.rotate_requested = False

        if session.new:
            # Abandoned sessions never send their cookie back to expire themselves
            self.store.purge_if_due()

        # Rolling window: every request re-arms the idle timeout
        self.store.save(session.sid, session, new=session.new)
        session.new = False

        response.set_cookie(
            self.get_cookie_name(app),
            session.sid,
            max_age=int(self.store.idle_timeout.total_seconds()),
            domain=self.get_cookie_domain(app),
            path=self.get_cookie_path(app),
            secure=self.get_cookie_secure(app),
            httponly=self.get_cookie_httponly(app),
            samesite=self.get_cookie_samesite(app),
        )


def init_sessions(app):
    """Install the server-side session interface on ``app``."""
    idle = timedelta(minutes=app.config['SESSION_IDLE_MINUTES'])
    app.config['PERMANENT_SESSION_LIFETIME'] = idle
    store = SessionStore(idle, purge_interval=app.config.get('SESSION_PURGE_INTERVAL_SECONDS'))
    app.session_interface = ServerSessionInterface(store)
    app.extensions['session_store'] = store
    return store
