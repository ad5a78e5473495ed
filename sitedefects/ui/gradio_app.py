from __future__ import annotations

import json
import os
from pathlib import Path

import gradio as gr
import requests
from dotenv import load_dotenv

from sitedefects.ui.frames import (
    category_chart_frame,
    detail_frame,
    edit_form_values,
    edit_payload,
    overview_frame,
    records_frame,
    stat_cards_markdown,
    status_frame,
    summary_report_frame,
)

load_dotenv()

API_BASE = os.getenv("SITEDEFECTS_API_BASE", "http://localhost:8000")
PROJECT_NAME = os.getenv("PROJECT_NAME", "VAY CHINNAKHET")
STATUS_CHOICES = ["Completed", "Pending", "Fixed (Wait CM)", "No Defect", "Not Checked"]
CUSTOM_CSS = """
/* Wrap long location names in the slide tables */
.wrap-table table { table-layout: fixed !important; width: 100%; }
.wrap-table th, .wrap-table td {
  white-space: normal !important;
  overflow-wrap: anywhere;
  line-height: 1.35;
}
"""


def _api(method: str, path: str, **kwargs):
    resp = requests.request(method, f"{API_BASE}/v1{path}", timeout=30, **kwargs)
    try:
        resp.raise_for_status()
    except requests.HTTPError as e:
        try:
            msg = e.response.json().get("detail") or str(e)
        except ValueError:
            msg = str(e)
        raise gr.Error(str(msg))
    return resp.json() if resp.content else None


def load_dashboard():
    summary = _api("GET", "/summary")
    categories = _api("GET", "/categories")
    distribution = _api("GET", "/status-distribution")
    pending = _api("GET", "/pending-approval")
    return (
        stat_cards_markdown(summary),
        category_chart_frame(categories),
        status_frame(distribution),
        records_frame(pending["items"]),
    )


def search_records(term: str):
    return records_frame(_api("GET", "/defects", params={"q": term or None})["items"])


def add_record(category, location, total, fixed, status, target, note, term):
    _api("POST", "/defects", json={
        "category": category or None,
        "location": location or None,
        "totalDefects": int(total or 0),
        "fixedDefects": int(fixed or 0),
        "status": status,
        "targetDate": target or None,
        "note": note or None,
    })
    return search_records(term)


def load_record(record_id):
    if not record_id:
        raise gr.Error("Enter the record ID to edit.")
    record = _api("GET", f"/defects/{record_id}")
    return (record, *edit_form_values(record), record["totalDefects"], record["fixedDefects"])


def edit_record(record_id, current, location, status, target, note, term):
    if not record_id:
        raise gr.Error("Enter the record ID to edit.")
    if current and current["id"] != record_id:
        current = None
    changes = edit_payload(current, location, status, target, note)
    if not changes:
        gr.Info("Nothing to save.")
        return current, search_records(term)
    record = _api("PATCH", f"/defects/{record_id}", json=changes)
    return record, search_records(term)


def set_counts(record_id, total, fixed, term):
    if not record_id:
        raise gr.Error("Enter the record ID to edit.")
    _api("PUT", f"/defects/{record_id}/counts", json={"totalDefects": int(total), "fixedDefects": int(fixed)})
    return search_records(term)


def delete_record(record_id, term):
    if not record_id:
        raise gr.Error("Enter the record ID to delete.")
    _api("DELETE", f"/defects/{record_id}")
    return search_records(term)


def rename_category(old, new, term):
    result = _api("POST", "/categories/rename", json={"old": old, "new": new})
    gr.Info(f"Renamed {result['renamed']} records.")
    return search_records(term)


def import_file(path, merge, term):
    if not path:
        raise gr.Error("Choose a JSON file to import.")
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    result = _api("POST", "/defects/import", json=payload, params={"mode": "merge" if merge else "replace"})
    gr.Info(f"Imported {result['count']} records.")
    return search_records(term)


def export_file():
    resp = requests.get(f"{API_BASE}/v1/defects/export", timeout=30)
    resp.raise_for_status()
    out_dir = Path("outputs"); out_dir.mkdir(exist_ok=True)
    out_path = out_dir / "defects-export.json"
    out_path.write_bytes(resp.content)
    return str(out_path)


def load_summary_report():
    return summary_report_frame(_api("GET", "/reports/summary"))


def load_overview():
    return overview_frame(_api("GET", "/slides/overview"))


def load_detail():
    slide = _api("GET", "/slides/detail")
    return detail_frame(slide["left"]), detail_frame(slide["right"])


with gr.Blocks(title=f"{PROJECT_NAME} Defects", css=CUSTOM_CSS) as demo:
    gr.Markdown(f"## {PROJECT_NAME}\nDefect status per location.")

    with gr.Tab("Dashboard"):
        cards = gr.Markdown()
        with gr.Row():
            cat_plot = gr.BarPlot(x="Category", y="Count", color="Series", label="Defects by Category")
            status_table = gr.Dataframe(label="Status Distribution", interactive=False)
        pending_table = gr.Dataframe(label="Pending CM Approval", interactive=False)
        gr.Button("Refresh").click(load_dashboard, outputs=[cards, cat_plot, status_table, pending_table])

    with gr.Tab("Data Entry"):
        term_in = gr.Textbox(label="Search", placeholder="Location, category or status")
        records_table = gr.Dataframe(label="Defect Registry", interactive=False)
        term_in.submit(search_records, inputs=[term_in], outputs=[records_table])
        with gr.Accordion("Add row", open=False):
            with gr.Row():
                a_cat = gr.Textbox(label="Category")
                a_loc = gr.Textbox(label="Location")
                a_total = gr.Number(label="Total", value=0, precision=0)
                a_fixed = gr.Number(label="Fixed", value=0, precision=0)
            with gr.Row():
                a_status = gr.Dropdown(label="Status", choices=STATUS_CHOICES, value="Pending")
                a_target = gr.Textbox(label="Target date")
                a_note = gr.Textbox(label="Note")
            gr.Button("Add").click(
                add_record,
                inputs=[a_cat, a_loc, a_total, a_fixed, a_status, a_target, a_note, term_in],
                outputs=[records_table],
            )
        with gr.Accordion("Edit / delete row", open=False):
            e_current = gr.State(None)
            with gr.Row():
                e_id = gr.Textbox(label="Record ID")
                e_load = gr.Button("Load")
            with gr.Row():
                e_loc = gr.Textbox(label="Location")
                e_status = gr.Dropdown(label="Status", choices=STATUS_CHOICES)
                e_target = gr.Textbox(label="Target date")
                e_note = gr.Textbox(label="Note")
            with gr.Row():
                e_total = gr.Number(label="Total", precision=0)
                e_fixed = gr.Number(label="Fixed", precision=0)
            e_load.click(
                load_record, inputs=[e_id], outputs=[e_current, e_loc, e_status, e_target, e_note, e_total, e_fixed]
            )
            with gr.Row():
                gr.Button("Save fields").click(
                    edit_record,
                    inputs=[e_id, e_current, e_loc, e_status, e_target, e_note, term_in],
                    outputs=[e_current, records_table],
                )
                gr.Button("Save counts").click(
                    set_counts, inputs=[e_id, e_total, e_fixed, term_in], outputs=[records_table]
                )
                gr.Button("Delete", variant="stop").click(
                    delete_record, inputs=[e_id, term_in], outputs=[records_table]
                )
        with gr.Accordion("Rename category", open=False):
            with gr.Row():
                r_old = gr.Textbox(label="Current name")
                r_new = gr.Textbox(label="New name")
            gr.Button("Rename").click(rename_category, inputs=[r_old, r_new, term_in], outputs=[records_table])
        with gr.Row():
            imp = gr.File(label="Import JSON", file_types=[".json"], type="filepath")
            merge_in = gr.Checkbox(label="Merge by id", value=False)
            gr.Button("Import").click(import_file, inputs=[imp, merge_in, term_in], outputs=[records_table])
            gr.Button("Export JSON").click(export_file, outputs=[gr.File(label="Download")])

    with gr.Tab("Summary Excel"):
        summary_table = gr.Dataframe(label="Project Summary Report", interactive=False)
        gr.Button("Refresh").click(load_summary_report, outputs=[summary_table])

    with gr.Tab("PPT Summary"):
        overview_table = gr.Dataframe(label="Defect Status Overview", interactive=False)
        gr.Button("Refresh").click(load_overview, outputs=[overview_table])

    with gr.Tab("PPT Detail"):
        with gr.Row():
            left_table = gr.Dataframe(label="Left", interactive=False, elem_classes=["wrap-table"])
            right_table = gr.Dataframe(label="Right", interactive=False, elem_classes=["wrap-table"])
        gr.Button("Refresh").click(load_detail, outputs=[left_table, right_table])

    demo.load(load_dashboard, outputs=[cards, cat_plot, status_table, pending_table])
    demo.load(search_records, inputs=[term_in], outputs=[records_table])


def main():
    demo.launch(server_name="0.0.0.0", server_port=7860)


if __name__ == "__main__":
    main()
