from src.deepcli.dispatcher import Dispatcher
from src.deepcli.interactive import InteractiveSession

from conftest import FakeHttpResponse, completion

def scripted(lines):
    it = iter(lines)

    def read_line(prompt):
        try:
            return next(it)
        except StopIteration:
            raise EOFError
    return read_line

def make_session(settings, out, err, lines=(), **kw):
    return InteractiveSession(Dispatcher(settings), read_line=scripted(lines), out=out, err=err, **kw)

def test_exchanges_accumulate_and_history_is_sent(settings, fake_post, out, err):
    fake_post.replies += [FakeHttpResponse(body=completion("one")), FakeHttpResponse(body=completion("two"))]
    s = make_session(settings, out, err, ["first", "second"])

    assert s.run() == 0
    assert len(s.transcript) == 2
    assert len(fake_post.calls) == 2

    second_msgs = fake_post.calls[1]["json"]["messages"]
    assert [m["role"] for m in second_msgs] == ["system", "user", "assistant", "user"]
    assert second_msgs[2]["content"] == "one"
    assert "one\n" in out.file.getvalue()

def test_clear_keeps_transcript(settings, fake_post, out, err, tmp_path):
    p = tmp_path / "a.txt"
    p.write_text("data", encoding="utf-8")
    s = make_session(settings, out, err)

    s.handle_line("hello")
    before = list(s.transcript)

    s.handle_line("pending line \\")
    s.handle_line(f"\\file {p}")
    assert s.pending == ["pending line "]
    assert s.attachment is not None

    s.handle_line("\\clear")
    assert s.pending == []
    assert s.attachment is None
    assert list(s.transcript) == before
    assert len(fake_post.calls) == 1

def test_continuation_lines_are_joined(settings, fake_post, out, err):
    s = make_session(settings, out, err)
    assert s.handle_line("line one \\") is None
    assert fake_post.calls == []

    s.handle_line("line two")
    user = fake_post.calls[0]["json"]["messages"][-1]
    assert user["content"] == "line one \nline two"

def test_file_directive_attaches_to_next_message_only(settings, fake_post, out, err, tmp_path):
    p = tmp_path / "notes.txt"
    p.write_text("remember this", encoding="utf-8")
    s = make_session(settings, out, err, [f"\\file {p}", "summarize", "and again"])

    s.run()
    assert fake_post.calls[0]["json"]["messages"][-1]["content"].endswith("remember this")
    assert fake_post.calls[1]["json"]["messages"][-1]["content"] == "and again"

def test_bad_file_directive_reports_and_continues(settings, fake_post, out, err, tmp_path):
    s = make_session(settings, out, err, [f"\\file {tmp_path / 'missing.txt'}", "still here"])

    assert s.run() == 0
    assert "error" in err.file.getvalue()
    assert len(fake_post.calls) == 1
    assert len(s.transcript) == 1

def test_transport_error_does_not_touch_transcript(settings, fake_post, out, err):
    fake_post.replies += [FakeHttpResponse(status_code=500, text="boom"), FakeHttpResponse(body=completion("fine"))]
    s = make_session(settings, out, err, ["first", "retry"])

    assert s.run() == 0
    assert "500" in err.file.getvalue()
    assert len(s.transcript) == 1

def test_exit_directive_stops_loop(settings, fake_post, out, err):
    s = make_session(settings, out, err, ["\\exit", "never sent"])
    assert s.run() == 0
    assert fake_post.calls == []

def test_initial_prompt_and_json_mode(settings, fake_post, out, err):
    fake_post.replies.append(FakeHttpResponse(body=completion('{"k": "v"}')))
    s = make_session(settings, out, err, json_mode=True)

    s.run(initial_prompt="give json")
    assert fake_post.calls[0]["json"]["response_format"] == {"type": "json_object"}
    assert '"k": "v"' in out.file.getvalue()
