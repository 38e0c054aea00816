"""Integration tests for resolving and rebinding callbacks."""

from wirebox import Container


class Mailer:
    def __init__(self):
        self.configured = False


class SmtpMailer(Mailer):
    pass


class SesMailer(Mailer):
    pass


class Newsletter:
    def __init__(self, mailer: Mailer):
        self.mailer = mailer

    def set_mailer(self, mailer):
        self.mailer = mailer


class TestResolvingCallbacks:
    """Test callbacks fired while objects are resolved."""

    def test_global_callback_sees_every_resolution(self):
        """Test that a global callback receives the object and the container."""
        container = Container()
        seen = []
        container.resolving(lambda obj, c: seen.append((type(obj), c)))

        container.make(Mailer)
        container.make(Newsletter)

        assert (Mailer, container) in seen
        assert (Newsletter, container) in seen

    def test_scoped_callback_matches_subclasses(self):
        """Test that a class key matches instances of subclasses."""
        container = Container()
        container.bind(Mailer, SmtpMailer)
        container.resolving(Mailer, lambda mailer: setattr(mailer, "configured", True))

        newsletter = container.make(Newsletter)

        assert isinstance(newsletter.mailer, SmtpMailer)
        assert newsletter.mailer.configured is True

    def test_callback_scoped_by_type_hint(self):
        """Test that the first parameter's annotation scopes a lone callback."""
        container = Container()
        seen = []

        def on_mailer(mailer: Mailer, c):
            seen.append(mailer)

        container.resolving(on_mailer)

        container.make(Newsletter)

        assert len(seen) == 1
        assert isinstance(seen[0], Mailer)

    def test_string_key_callback(self):
        """Test scoping a callback to a string identifier."""
        container = Container()
        container.bind("mailer", SesMailer)
        seen = []
        container.resolving("mailer", lambda mailer: seen.append(mailer))

        mailer = container.make("mailer")
        container.make(Mailer)

        assert seen == [mailer]

    def test_after_resolving_runs_last(self):
        """Test the order of resolving and after-resolving callbacks."""
        container = Container()
        order = []
        container.after_resolving(Mailer, lambda m: order.append("after scoped"))
        container.after_resolving(lambda m: order.append("after global"))
        container.resolving(Mailer, lambda m: order.append("scoped"))
        container.resolving(lambda m: order.append("global"))

        container.make(Mailer)

        assert order == ["global", "scoped", "after global", "after scoped"]

    def test_cached_instances_do_not_fire_again(self):
        """Test that a cache hit skips the callbacks."""
        container = Container()
        container.singleton(Mailer)
        seen = []
        container.resolving(Mailer, lambda m: seen.append(m))

        container.make(Mailer)
        container.make(Mailer)

        assert len(seen) == 1


class TestRebindingCallbacks:
    """Test callbacks fired when a resolved abstract is re-registered."""

    def test_rebinding_fires_on_rebind(self):
        """Test that rebinding a resolved abstract fires with the new instance."""
        container = Container()
        container.singleton(Mailer, SmtpMailer)
        received = []

        current = container.rebinding(Mailer, lambda c, mailer: received.append(mailer))
        container.singleton(Mailer, SesMailer)

        assert isinstance(current, SmtpMailer)
        assert len(received) == 1
        assert isinstance(received[0], SesMailer)

    def test_rebinding_unbound_returns_none(self):
        """Test registering a rebinding callback before any binding."""
        container = Container()

        assert container.rebinding("mailer", lambda c, m: None) is None

    def test_rebinding_not_fired_before_resolution(self):
        """Test that rebinding an abstract never resolved stays silent."""
        container = Container()
        received = []
        container.rebinding("mailer", lambda c, m: received.append(m))

        container.bind("mailer", SmtpMailer)
        container.bind("mailer", SesMailer)

        assert received == []

    def test_instance_replacement_fires_rebinding(self):
        """Test that swapping an instance notifies listeners."""
        container = Container()
        container.instance(Mailer, SmtpMailer())
        received = []
        container.rebinding(Mailer, lambda c, m: received.append(m))
        replacement = SesMailer()

        container.instance(Mailer, replacement)

        assert received == [replacement]

    def test_refresh_updates_target(self):
        """Test that refresh keeps a dependent object up to date."""
        container = Container()
        container.singleton(Mailer, SmtpMailer)
        newsletter = Newsletter(container.make(Mailer))
        container.refresh(Mailer, newsletter, "set_mailer")

        container.singleton(Mailer, SesMailer)

        assert isinstance(newsletter.mailer, SesMailer)

    def test_extend_cached_instance_fires_rebinding(self):
        """Test that extending a cached instance decorates it and notifies listeners."""
        container = Container()
        container.singleton(Mailer)
        container.make(Mailer)
        received = []
        container.rebinding(Mailer, lambda c, m: received.append(m))

        container.extend(Mailer, lambda mailer: setattr(mailer, "configured", True) or mailer)

        assert container.make(Mailer).configured is True
        assert received == [container.make(Mailer)]
