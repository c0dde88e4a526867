from formulae.tracer import Tracer


def test_tracer_records_steps_in_order():
    t = Tracer()
    t.add("input", {"text": "1+1"})
    t.add("parsed")
    assert len(t) == 2
    assert t.kinds() == ["input", "parsed"]
    assert t.steps() == [
        {"kind": "input", "detail": {"text": "1+1"}},
        {"kind": "parsed", "detail": {}},
    ]


def test_tracer_copies_detail():
    t = Tracer()
    detail = {"count": 1}
    t.add("tokens", detail)
    detail["count"] = 2
    assert t.steps()[0]["detail"] == {"count": 1}
