from snaplist.models import MembershipTier, User


def test_seed_tiers_command(app):
    result = app.test_cli_runner().invoke(args=["seed-tiers"])

    assert result.exit_code == 0
    assert "created: FREE, STANDARD, PRO" in result.output
    assert MembershipTier.query.count() == 3


def test_make_admin_command(app, db, user):
    result = app.test_cli_runner().invoke(args=["make-admin", user.email.upper()])

    assert result.exit_code == 0
    db.session.expire_all()
    assert User.query.filter_by(email=user.email).first().is_admin is True


def test_make_admin_unknown_email(app):
    result = app.test_cli_runner().invoke(args=["make-admin", "nobody@example.com"])

    assert result.exit_code != 0
    assert "No user with email" in result.output
