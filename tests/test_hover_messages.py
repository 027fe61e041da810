import pytest

from lifetimeviz import hover_messages as hm


def test_fmt_style_wraps_name():
    styled = hm.fmt_style("x")
    assert styled.startswith("&lt;span style=&quot;font-family: 'Source Code Pro',")
    assert styled.endswith("monospace, monospace !important;&quot;&gt;x&lt;/span&gt;")


def test_fmt_style_keeps_plain_text_verbatim():
    assert "<b>&amp;</b>" in hm.fmt_style("<b>&amp;</b>")


@pytest.mark.parametrize(
    "func, suffix",
    [
        (hm.event_dot_ref_go_out_out_scope, " goes out of scope"),
        (hm.event_dot_owner_go_out_out_scope, " goes out of scope"),
        (hm.event_dot_init_param, " is initialized as the function argument"),
        (hm.state_out_of_scope, " is out of scope"),
        (hm.state_full_privilege, " is the owner of the resource"),
        (
            hm.state_partial_privilege,
            "'s resource is being shared by one or more variables",
        ),
    ],
)
def test_single_name_messages(func, suffix):
    assert func("abc") == hm.fmt_style("abc") + suffix


@pytest.mark.parametrize(
    "func, suffix",
    [
        (hm.event_dot_copy_to, "'s resource is copied"),
        (hm.event_dot_move_to, "'s resource is moved"),
        (hm.event_dot_move_to_caller, "'s resource is moved to the caller"),
        (hm.event_dot_static_lend, "'s resource is immutably borrowed"),
        (hm.event_dot_mut_lend, "'s resource is mutably borrowed"),
        (hm.event_dot_static_return, "'s mutable borrow ends"),
        (hm.event_dot_mut_return, "'s immutable borrow ends"),
        (hm.event_dot_acquire, " acquires ownership of a resource"),
        (hm.event_dot_mut_borrow, " mutably borrows a resource"),
        (hm.event_dot_static_borrow, " immutably borrows a resource"),
        (hm.event_dot_static_reacquire, "'s resource is no longer immutably borrowed"),
        (hm.event_dot_mut_reacquire, "'s resource is no longer mutably borrowed"),
    ],
)
def test_target_is_ignored_in_dot_messages(func, suffix):
    assert func("a", "b") == hm.fmt_style("a") + suffix
    assert func("a", "b") == func("a", "zzz")


def test_copy_from_is_unstyled():
    assert hm.event_dot_copy_from("y", "x") == "y is initialized by copy from x"


@pytest.mark.parametrize(
    "func, middle",
    [
        (hm.arrow_move_val_to_val, "'s resource is moved to "),
        (hm.arrow_copy_val_to_val, "'s resource is copied to "),
        (hm.arrow_move_val_to_func, "'s resource is moved to function "),
        (hm.arrow_copy_val_to_func, "'s resource is copied to function "),
        (hm.arrow_static_lend_val_to_val, "'s resource is immutably borrowed by "),
        (hm.arrow_static_lend_val_to_func, "'s resource is immutably borrowed by function "),
        (hm.arrow_mut_lend_val_to_val, "'s resource is mutably borrowed by "),
        (hm.arrow_mut_lend_val_to_func, "'s resource is mutably borrowed by function "),
    ],
)
def test_arrow_messages(func, middle):
    assert func("a", "b") == hm.fmt_style("a") + middle + hm.fmt_style("b")


def test_arrow_move_func_to_val():
    expected = "Function " + hm.fmt_style("f") + "'s resource is moved to " + hm.fmt_style("x")
    assert hm.arrow_move_func_to_val("f", "x") == expected


def test_arrow_returns():
    a, b = hm.fmt_style("r"), hm.fmt_style("s")
    assert hm.arrow_static_return("r", "s") == a + "'s immutable borrow of " + b + "'s resource ends"
    assert hm.arrow_mut_return("r", "s") == a + "'s mutable borrow of " + b + "'s resource ends"


def test_state_resource_moved_names_owner_twice():
    msg = hm.state_resource_moved("v", "w")
    assert msg.count(hm.fmt_style("v")) == 2
    assert hm.fmt_style("w") not in msg


def test_state_resource_revoked():
    assert hm.state_resource_revoked("v", "w") == (
        hm.fmt_style("v") + "'s resource is mutably borrowed, so it cannot access the resource"
    )


def test_state_invalid_and_structure():
    assert hm.state_invalid("q") == "something is wrong with the timeline of " + hm.fmt_style("q")
    assert hm.structure("q") == "the components in the box belong to struct " + hm.fmt_style("q")