from __future__ import annotations

from dailyreport_desktop import tasks
from dailyreport_desktop.models import ReportAggregate, User
from dailyreport_desktop.planning import add_entry
from dailyreport_desktop.renderer import COLUMNS, ReportRenderer, nl2br
from dailyreport_desktop.theme import (DARK, LIGHT, ColorSaveResult, remove_color,
                                       resolve_palette, save_color, select_color,
                                       toggle_viewer_mode)


def test_plain_theme_ignores_theme_color(report: ReportAggregate):
    select_color(report, "#4472c4")
    assert report.is_plain_theme is False
    assert resolve_palette(report, LIGHT).header_background == "#4472c4"

    report.is_plain_theme = True
    palette = resolve_palette(report, LIGHT)
    assert palette.header_background == "#ffffff"
    assert palette.header_text == "#000000"
    assert palette.border == "#000000"
    assert resolve_palette(report, DARK).header_background != "#4472c4"


def test_plain_theme_keeps_black_borders_in_dark_mode(report: ReportAggregate):
    report.is_plain_theme = True
    assert resolve_palette(report, DARK).border == "#000000"
    assert "border: 1px solid #000000" in ReportRenderer().render(report, DARK)


def test_selecting_plain_suggestion_switches_to_plain(report: ReportAggregate):
    select_color(report, "white")
    assert report.is_plain_theme is True
    select_color(report, "#ed7d31")
    assert report.is_plain_theme is False


def test_color_library(user: User):
    assert save_color(user, "#123456") is ColorSaveResult.SAVED
    assert save_color(user, "#abcdef") is ColorSaveResult.SAVED
    assert save_color(user, "#123456") is ColorSaveResult.DUPLICATE
    assert save_color(user, "white") is ColorSaveResult.IGNORED
    assert user.saved_colors == ["#123456", "#abcdef"]

    assert remove_color(user, "#123456") is True
    assert remove_color(user, "#123456") is False
    assert user.saved_colors == ["#abcdef"]


def test_toggle_viewer_mode(user: User):
    assert user.theme == "light"
    assert toggle_viewer_mode(user) == "dark"
    assert toggle_viewer_mode(user) == "light"


def test_render_lists_columns_rows_and_planning(report: ReportAggregate, user: User):
    report.pre_text = "Hi Team,\n\nPlease find my work report"
    report.post_text = "Best Regards,\nAsha"
    first = tasks.start_task(report, user, "09:00", {"project_name": "Billing <API>"})
    tasks.stop_task(report, first.id, "10:30")
    entry = add_entry(report)
    entry.description = "Deploy\nbilling"

    html = ReportRenderer().render(report, LIGHT)

    for column in COLUMNS:
        assert f">{column.title}</th>" in html
    assert "Billing &lt;API&gt;" in html
    assert ">1.50</td>" in html
    assert ">-</td>" in html
    assert "Hi Team,<br/><br/>Please find my work report" in html
    assert "Deploy<br/>billing" in html
    assert 'colspan="2"' in html
    assert f'colspan="{len(COLUMNS) - 2}"' in html
    assert "#70ad47" in html


def test_render_stripes_task_rows(report: ReportAggregate, user: User):
    tasks.start_task(report, user, "09:00")
    tasks.start_task(report, user, "10:00")
    palette = resolve_palette(report, LIGHT)

    html = ReportRenderer().render(report, LIGHT)

    assert f'<tr style="background-color: {palette.row_backgrounds[0]};">' in html
    assert f'<tr style="background-color: {palette.row_backgrounds[1]};">' in html


def test_render_is_deterministic_for_the_same_input(report: ReportAggregate, user: User):
    tasks.start_task(report, user, "09:00")
    renderer = ReportRenderer()
    assert renderer.render(report, DARK) == renderer.render(report, DARK)
    assert renderer.render(report, DARK) != renderer.render(report, LIGHT)


def test_nl2br_escapes_markup():
    assert str(nl2br("a<b>\r\nc")) == "a&lt;b&gt;<br/>c"
    assert str(nl2br(None)) == ""
