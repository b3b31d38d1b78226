from unittest.mock import Mock, MagicMock

from app.auth.session import AuthEvent, SessionContext
from app.models.activity import UserLogin
from app.services.activity import track_logins


class TestSessionContext:
    def test_publish_reaches_subscribers(self):
        context = SessionContext()
        listener = Mock()
        context.subscribe(listener)
        user, db = Mock(), MagicMock()

        context.publish(AuthEvent.SIGNED_IN, user, db)

        listener.assert_called_once_with(AuthEvent.SIGNED_IN, user, db)

    def test_unsubscribe(self):
        context = SessionContext()
        listener = Mock()
        unsubscribe = context.subscribe(listener)
        unsubscribe()
        unsubscribe()

        context.publish(AuthEvent.SIGNED_OUT, Mock(), MagicMock())

        listener.assert_not_called()
        assert context.listener_count == 0

    def test_failing_listener_does_not_block_others(self):
        context = SessionContext()
        failing = Mock(side_effect=RuntimeError("boom"))
        healthy = Mock()
        context.subscribe(failing)
        context.subscribe(healthy)

        context.publish(AuthEvent.SIGNED_IN, Mock(id=1), MagicMock())

        healthy.assert_called_once()


class TestTrackLogins:
    def test_records_login_on_sign_in(self):
        db = MagicMock()
        user = Mock(id=5)

        track_logins(AuthEvent.SIGNED_IN, user, db)

        added = db.add.call_args[0][0]
        assert isinstance(added, UserLogin)
        assert added.user_id == 5
        db.begin_nested.assert_called_once()

    def test_ignores_other_events(self):
        db = MagicMock()
        track_logins(AuthEvent.SIGNED_OUT, Mock(id=5), db)
        track_logins(AuthEvent.PASSWORD_UPDATED, Mock(id=5), db)
        db.add.assert_not_called()


def test_app_subscribes_login_tracking():
    from main import app
    assert isinstance(app.state.session_context, SessionContext)
    assert app.state.session_context.listener_count >= 1
