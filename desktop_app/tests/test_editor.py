from __future__ import annotations

import pytest

from dailyreport_desktop.autosave import SaveStatus
from dailyreport_desktop.dispatch import DispatchState
from dailyreport_desktop.editor import ReportEditor, apply_defaults
from dailyreport_desktop.errors import ErrorKind, StorageError
from dailyreport_desktop.models import ReportAggregate, User


@pytest.fixture()
def editor(session, storage, stored_report, clipboard, composer, scheduler, clock) -> ReportEditor:
    editor = ReportEditor(
        session,
        storage,
        stored_report,
        clipboard=clipboard,
        composer=composer,
        scheduler=scheduler,
        clock=clock,
    )
    scheduler.run_pending()
    storage.upserts.clear()
    return editor


def test_defaults_fill_empty_texts_only(report: ReportAggregate, user: User):
    apply_defaults(report, user)
    assert report.pre_text == "Hi Team,\n\nPlease find my work report for 2024-03-04:"
    assert report.post_text == "Best Regards,\nAsha Rao\nEmp ID: E-1042"

    report.pre_text = "Custom greeting"
    apply_defaults(report, user)
    assert report.pre_text == "Custom greeting"


def test_opening_the_editor_saves_the_defaults(session, storage, stored_report, clipboard, composer, scheduler):
    ReportEditor(session, storage, stored_report, clipboard=clipboard, composer=composer, scheduler=scheduler)
    scheduler.run_pending()

    assert storage.reports[stored_report.id].pre_text.startswith("Hi Team,")


def test_task_edits_are_saved_once_per_burst(editor: ReportEditor, storage, scheduler, clock):
    task = editor.start_task()
    editor.edit_task(task.id, "project_name", "Billing")
    editor.edit_task(task.id, "remarks", "Invoices")
    clock.set(10, 30)
    editor.stop_task(task.id)

    assert editor.autosave.status is SaveStatus.PENDING
    scheduler.run_pending()

    assert len(storage.upserts) == 1
    saved = storage.reports[editor.report.id].tasks[0]
    assert (saved.project_name, saved.remarks, saved.working_hours) == ("Billing", "Invoices", "1.50")


def test_stopping_a_stopped_task_does_not_schedule_a_save(editor: ReportEditor, scheduler, clock):
    task = editor.start_task()
    clock.set(9, 30)
    editor.stop_task(task.id)
    scheduler.run_pending()

    editor.stop_task(task.id)
    assert scheduler.live == []



def test_restarting_a_stopped_row_starts_a_saved_copy(editor: ReportEditor, storage, scheduler, clock):
    task = editor.start_task()
    editor.edit_task(task.id, "project_name", "Billing")
    clock.set(10, 0)
    editor.stop_task(task.id)
    scheduler.run_pending()
    storage.upserts.clear()

    clock.set(11, 15)
    restarted = editor.restart_task(task.id)

    assert restarted is not None and restarted.is_running
    assert (restarted.project_name, restarted.start_time) == ("Billing", "11:15")
    assert editor.autosave.status is SaveStatus.PENDING
    scheduler.run_pending()
    assert [saved.project_name for saved in storage.reports[editor.report.id].tasks] == ["Billing", "Billing"]
    assert editor.restart_task(restarted.id) is None

def test_start_task_from_text_without_parser(editor: ReportEditor):
    outcome = editor.start_task_from_text("  Fix login bug  ")

    assert outcome is not None and outcome.used_fallback
    assert editor.report.tasks[-1].project_name == "Fix login bug"
    assert editor.start_task_from_text("   ") is None


def test_start_task_from_text_with_parser(editor: ReportEditor):
    class StubParser:
        def parse(self, text):
            return {"projectName": "Payments", "projectType": "UI Design", "assignedBy": "Priya", "remarks": ""}

    editor.parser = StubParser()
    outcome = editor.start_task_from_text("Spent 2 hours on UI design")

    assert outcome is not None and not outcome.used_fallback
    task = editor.report.tasks[-1]
    assert (task.project_name, task.assigned_by, task.start_time) == ("Payments", "Priya", "09:00")


def test_continue_recent_project(editor: ReportEditor, clock):
    editor.start_task({"project_name": "Billing", "project_type": "Bugfix"})
    clock.set(11, 0)
    editor.start_task({"project_name": "Search"})

    assert editor.recent_projects() == ["Billing", "Search"]
    clock.set(13, 0)
    continued = editor.continue_project("Billing")

    assert continued is not None
    assert continued.project_type == "Bugfix"
    assert [task.is_running for task in editor.report.tasks] == [False, False, True]


def test_planning_and_texts_trigger_autosave(editor: ReportEditor, storage, scheduler):
    entry = editor.add_planning_entry()
    editor.edit_planning_entry(entry.id, "description", "Deploy billing")
    editor.set_post_text("Thanks,\nAsha")
    scheduler.run_pending()

    saved = storage.reports[editor.report.id]
    assert saved.planning_tasks[0].description == "Deploy billing"
    assert saved.post_text == "Thanks,\nAsha"

    assert editor.remove_planning_entry(entry.id) is True
    scheduler.run_pending()
    assert storage.reports[editor.report.id].planning_tasks == []


def test_theme_changes_persist(editor: ReportEditor, storage, scheduler):
    editor.select_color("#4472c4")
    assert editor.save_current_color().value == "saved"
    assert editor.save_current_color().value == "duplicate"
    assert editor.toggle_viewer_mode() == "dark"
    scheduler.run_pending()

    user_id = editor.user.id
    assert storage.users[user_id].saved_colors == ["#4472c4"]
    assert storage.users[user_id].theme == "dark"
    assert storage.reports[editor.report.id].theme_color == "#4472c4"

    assert editor.remove_saved_color("#4472c4") is True
    assert storage.users[user_id].saved_colors == []


def test_preview_and_dispatch(editor: ReportEditor, session, clipboard, composer):
    user = session.require_user()
    user.default_to = "lead@example.com"
    editor.start_task({"project_name": "Billing"})

    html = editor.preview()
    assert "Billing" in html
    outcome = editor.dispatch()

    assert outcome.dispatched is True
    assert editor.flow.state is DispatchState.DISPATCHED
    assert len(clipboard.writes) == 1
    assert composer.urls[0].startswith("mailto:lead%40example.com")


def test_close_flushes_pending_save(editor: ReportEditor, storage):
    editor.set_pre_text("Last edit")
    editor.close()
    assert storage.reports[editor.report.id].pre_text == "Last edit"


def test_failed_save_keeps_edits_in_memory(editor: ReportEditor, storage, scheduler):
    storage.fail_with = StorageError(ErrorKind.UNAVAILABLE, "offline")
    editor.set_pre_text("Offline edit")
    scheduler.run_pending()

    assert editor.autosave.status is SaveStatus.NOT_SAVED
    assert editor.report.pre_text == "Offline edit"
