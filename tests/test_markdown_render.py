from boxexplorer.core.annotation import PLACEHOLDER, RenderScheduler, StreamPacer, render_markdown


def _scheduler():
    queue = []
    scheduler = RenderScheduler(formatter=lambda text: f"<p>{text}</p>", dispatch=queue.append)
    rendered = []
    scheduler.rendered.connect(lambda content, is_html: rendered.append((content, is_html)))
    return scheduler, queue, rendered


def test_render_markdown_escapes_raw_html():
    html = render_markdown("**bold** <script>x</script>")
    assert "<strong>bold</strong>" in html
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_requests_while_in_flight_coalesce_to_latest(qapp):
    scheduler, queue, rendered = _scheduler()

    scheduler.request("a")
    scheduler.request("b")
    scheduler.request("c")
    assert len(queue) == 1
    assert scheduler.has_pending

    queue.pop(0)()
    # the first render is stale by now
    assert rendered == []
    assert len(queue) == 1

    queue.pop(0)()
    assert rendered == [("<p>c</p>", True)]
    assert not scheduler.in_flight


def test_reset_drops_outstanding_render(qapp):
    scheduler, queue, rendered = _scheduler()

    scheduler.request("a")
    scheduler.reset()
    queue.pop(0)()

    assert rendered == []
    assert not scheduler.in_flight


def test_blank_and_failed_renders_fall_back_to_plain_text(qapp):
    rendered = []

    def explode(text):
        raise ValueError("bad markdown")

    scheduler = RenderScheduler(formatter=explode, dispatch=lambda fn: fn())
    scheduler.rendered.connect(lambda content, is_html: rendered.append((content, is_html)))

    scheduler.request("  ")
    scheduler.request("raw *text*")

    assert rendered == [(PLACEHOLDER, False), ("raw *text*", False)]


def test_pacer_reveals_one_character_per_tick(qapp):
    pacer = StreamPacer()
    revealed = []
    pacer.revealed.connect(revealed.append)

    assert pacer.tick() is False
    pacer.start()
    pacer.enqueue("ab")
    pacer.enqueue("")

    assert pacer.tick() is True
    assert pacer.tick() is True
    assert pacer.tick() is False
    assert revealed == ["a", "ab"]
    assert pacer.displayed == "ab"
    assert pacer.queued == ""

    pacer.stop()
    pacer.enqueue("c")
    assert pacer.tick() is False
