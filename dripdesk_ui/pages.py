# dripdesk_ui/pages.py
"""
Resource pages: the callers of the data grid.

Each page fetches its records from the record API, describes the grid columns,
and implements the edit/duplicate/delete intents the grid reports.
"""

import logging
from typing import Optional

import requests

from . import api_client
from .formatting import days_label, detail_link, format_date, format_day, status_label
from .grid import DEFAULT_SORT, Column, DataGrid, SortState
from .naming import next_copy_email, next_copy_name
from .notifications import Notifier, RecordingNotifier

logger = logging.getLogger(__name__)

MEMBERSHIPS = "contact_list_contacts"


class ResourcePage:
    """Base page. Subclasses set the collection and describe columns and copy rules."""

    collection = ""
    title = ""
    singular = "record"
    scoped_by_client = True
    copy_fields: tuple = ()
    editable_fields: tuple = ("name",)

    def __init__(self, client=api_client, notifier: Optional[Notifier] = None):
        self.client = client
        self.notifier = notifier or RecordingNotifier()

    # --- grid ---

    def columns(self) -> list:
        return [
            Column("name", "Name", actions=True, render=self._name_link),
            Column("updated_at", "Last Updated", render=lambda r: format_date(r.get("updated_at"))),
        ]

    def _name_link(self, record: dict) -> str:
        return detail_link(self.collection, record, self.display_name(record))

    def build_grid(self, records, sort: SortState = DEFAULT_SORT, **callbacks) -> DataGrid:
        return DataGrid(records, self.columns(), sort=sort, **callbacks)

    def display_name(self, record: dict) -> str:
        return record.get("name") or ""

    # --- loading ---

    def load(self, client_id=None) -> list:
        filters = {}
        if client_id and self.scoped_by_client:
            filters["client_id"] = client_id
        try:
            records = self.client.list_records(self.collection, **filters)
        except requests.RequestException as e:
            self.notifier.error(f"Failed to load {self.title.lower()}: {api_client.error_detail(e)}")
            return []
        return self.enrich(records)

    def enrich(self, records: list) -> list:
        return records

    def _client_names(self) -> dict:
        try:
            clients = self.client.list_records("clients")
        except requests.RequestException as e:
            logger.warning(f"Could not fetch client names: {e}")
            return {}
        return {c["id"]: c.get("name", "") for c in clients}

    def _memberships(self) -> list:
        try:
            return self.client.list_records(MEMBERSHIPS)
        except requests.RequestException as e:
            logger.warning(f"Could not fetch contact list memberships: {e}")
            return []

    # --- actions ---

    def existing_values(self, field: str) -> list:
        return [r.get(field) for r in self.client.list_records(self.collection)]

    def duplicate_payload(self, record: dict) -> dict:
        payload = {k: record.get(k) for k in self.copy_fields if k in record}
        payload["name"] = next_copy_name(record.get("name", ""), self.existing_values("name"))
        return payload

    def duplicate(self, record: dict) -> Optional[dict]:
        name = self.display_name(record)
        try:
            created = self.client.create_record(self.collection, self.duplicate_payload(record))
        except requests.RequestException as e:
            self.notifier.error(f"Failed to duplicate {self.singular}: {api_client.error_detail(e)}")
            return None
        self.notifier.success(f'{self.singular.capitalize()} "{name}" duplicated successfully')
        return created

    def delete_prompt(self, record: dict) -> str:
        return f'Are you sure you want to delete "{self.display_name(record)}"?'

    def delete(self, record: dict) -> bool:
        name = self.display_name(record)
        try:
            self.before_delete(record)
            self.client.delete_record(self.collection, record["id"])
        except requests.RequestException as e:
            self.notifier.error(f"Failed to delete {self.singular}: {api_client.error_detail(e)}")
            return False
        self.notifier.success(f'{self.singular.capitalize()} "{name}" deleted successfully')
        return True

    def before_delete(self, record: dict) -> None:
        pass

    def save(self, record_id, payload: dict) -> Optional[dict]:
        try:
            if record_id:
                saved = self.client.update_record(self.collection, record_id, payload)
            else:
                saved = self.client.create_record(self.collection, payload)
        except requests.RequestException as e:
            self.notifier.error(f"Failed to save {self.singular}: {api_client.error_detail(e)}")
            return None
        self.notifier.success(f'{self.singular.capitalize()} "{self.display_name(saved or payload)}" saved')
        return saved

    def blank_record(self, client_id=None) -> dict:
        record = {field: "" for field in self.editable_fields}
        if self.scoped_by_client:
            record["client_id"] = client_id or ""
        return record

    def editable_view(self, record: dict) -> dict:
        """The subset of a record offered in the edit form."""
        keys = list(self.editable_fields)
        if self.scoped_by_client:
            keys.append("client_id")
        return {k: record.get(k) for k in keys}


class ClientsPage(ResourcePage):
    collection = "clients"
    title = "Clients"
    singular = "client"
    scoped_by_client = False
    copy_fields = ("website", "notes")
    editable_fields = ("name", "website", "notes")

    def columns(self):
        return [
            Column("name", "Client", actions=True, render=self._name_link),
            Column("website", "Website"),
            Column("updated_at", "Last Updated", render=lambda r: format_date(r.get("updated_at"))),
        ]


class ContactsPage(ResourcePage):
    collection = "contacts"
    title = "Contacts"
    singular = "contact"
    copy_fields = ("client_id", "title", "first_name", "company", "job_title",
                   "website", "phone_number", "instagram_handle")
    editable_fields = ("title", "first_name", "last_name", "email", "company", "job_title",
                       "website", "phone_number", "instagram_handle")

    def display_name(self, record):
        return f"{record.get('first_name') or ''} {record.get('last_name') or ''}".strip()

    def columns(self):
        return [
            Column("name", "Name", actions=True, render=self._name_link, accessor=self.display_name),
            Column("email", "Email"),
            Column("client_name", "Client", render=lambda r: r.get("client_name") or "Unknown Client"),
            Column("title", "Title", render=lambda r: r.get("title") or "None"),
            Column("job_title", "Job Title"),
            Column("company", "Company"),
            Column("contact_lists", "Contact Lists", sortable=False, render=self._list_tags),
            Column("updated_at", "Last Updated", render=lambda r: format_day(r.get("updated_at"))),
        ]

    def _list_tags(self, record):
        lists = record.get("contact_lists") or []
        if not lists:
            return "None"
        return ", ".join(detail_link("contact_lists", lst, lst.get("name", "")) for lst in lists)

    def enrich(self, records):
        names = self._client_names()
        memberships = self._memberships()
        lists = {}
        if memberships:
            try:
                lists = {lst["id"]: lst for lst in self.client.list_records("contact_lists")}
            except requests.RequestException as e:
                logger.warning(f"Could not fetch contact lists: {e}")

        enriched = []
        for contact in records:
            list_ids = [m.get("contact_list_id") for m in memberships if m.get("contact_id") == contact.get("id")]
            contact_lists = [{"id": i, "name": lists[i].get("name", "")} for i in list_ids if i in lists]
            enriched.append({
                **contact,
                "client_name": names.get(contact.get("client_id"), "Unknown Client"),
                "contact_lists": contact_lists,
                "list_count": len(contact_lists),
            })
        return enriched

    def duplicate_payload(self, record):
        payload = {k: record.get(k) for k in self.copy_fields if k in record}
        payload["last_name"] = f"{record.get('last_name') or ''} (Copy)".strip()
        email = next_copy_email(record.get("email") or "", self.existing_values("email"))
        if email:
            payload["email"] = email
        return payload

    def editable_view(self, record):
        view = super().editable_view(record)
        view["contact_list_ids"] = [lst["id"] for lst in record.get("contact_lists") or []]
        return view

    def blank_record(self, client_id=None):
        record = super().blank_record(client_id)
        record["contact_list_ids"] = []
        return record

    def save(self, record_id, payload):
        """Saves the contact, then replaces its list memberships when `contact_list_ids` is given."""
        payload = dict(payload)
        list_ids = payload.pop("contact_list_ids", None)
        saved = super().save(record_id, payload)
        if saved is None or list_ids is None:
            return saved
        if isinstance(list_ids, str):
            list_ids = [list_ids]
        try:
            self.replace_memberships(saved["id"], list_ids)
        except requests.RequestException as e:
            self.notifier.error(f"Failed to update contact lists: {api_client.error_detail(e)}")
        return saved

    def replace_memberships(self, contact_id, list_ids) -> None:
        self.client.delete_where(MEMBERSHIPS, contact_id=contact_id)
        for list_id in dict.fromkeys(i for i in list_ids if i):
            self.client.create_record(MEMBERSHIPS, {"contact_id": contact_id, "contact_list_id": list_id})

    def delete_prompt(self, record):
        count = record.get("list_count") or 0
        if count > 0:
            return f'This contact is in {count} lists. Are you sure you want to delete "{self.display_name(record)}"?'
        return super().delete_prompt(record)

    def before_delete(self, record):
        self.client.delete_where(MEMBERSHIPS, contact_id=record["id"])


class ContactListsPage(ResourcePage):
    collection = "contact_lists"
    title = "Contact Lists"
    singular = "contact list"
    copy_fields = ("client_id", "description", "tags")
    editable_fields = ("name", "description", "status", "tags")

    def columns(self):
        return [
            Column("name", "List Name", actions=True, render=self._name_link),
            Column("description", "Description"),
            Column("contact_count", "# Contacts"),
            Column("updated_at", "Last Updated", render=lambda r: format_date(r.get("updated_at"))),
        ]

    def enrich(self, records):
        memberships = self._memberships()
        return [
            {**lst, "contact_count": sum(1 for m in memberships if m.get("contact_list_id") == lst.get("id"))}
            for lst in records
        ]

    def delete_prompt(self, record):
        count = record.get("contact_count") or 0
        if count > 0:
            return f'This list contains {count} contacts. Are you sure you want to delete "{record.get("name")}"?'
        return super().delete_prompt(record)

    def before_delete(self, record):
        self.client.delete_where(MEMBERSHIPS, contact_list_id=record["id"])


class TemplatesPage(ResourcePage):
    collection = "templates"
    title = "Email Templates"
    singular = "template"
    copy_fields = ("client_id", "subject", "html_content", "text_content", "attachments", "pdf_template_ids")
    editable_fields = ("name", "subject", "html_content", "text_content", "pdf_template_ids")

    def columns(self):
        return [
            Column("name", "Template Name", actions=True, render=self._name_link),
            Column("subject", "Subject"),
            Column("attachments", "Attachments", sortable=False,
                   render=lambda r: str(len(r.get("attachments") or [])) if r.get("attachments") else "None"),
            Column("updated_at", "Last Updated", render=lambda r: format_date(r.get("updated_at"))),
            Column("campaigns", "Used In Campaigns", sortable=False,
                   render=lambda r: ", ".join(c["name"] for c in r.get("campaigns") or []) or "Not used"),
        ]

    def enrich(self, records):
        try:
            campaigns = self.client.list_records("campaigns")
        except requests.RequestException as e:
            logger.warning(f"Could not fetch campaigns for template usage: {e}")
            campaigns = []
        return [
            {**t, "campaigns": [{"id": c.get("id"), "name": c.get("name", "")}
                                for c in campaigns if c.get("template_id") == t.get("id")]}
            for t in records
        ]


class PdfTemplatesPage(ResourcePage):
    collection = "pdf_templates"
    title = "PDF Templates"
    singular = "PDF template"
    copy_fields = ("client_id", "description", "html_content", "css_content")
    editable_fields = ("name", "description", "html_content", "css_content")

    def columns(self):
        return [
            Column("name", "Name", actions=True, render=self._name_link),
            Column("description", "Description"),
            Column("client_name", "Client"),
            Column("updated_at", "Last Updated", render=lambda r: format_date(r.get("updated_at"))),
        ]

    def enrich(self, records):
        names = self._client_names()
        return [{**t, "client_name": names.get(t.get("client_id"), "Unknown Client")} for t in records]


class CampaignsPage(ResourcePage):
    collection = "campaigns"
    title = "Campaigns"
    singular = "campaign"
    copy_fields = ("client_id", "template_id", "start_date", "days_of_week", "max_emails_per_day")
    editable_fields = ("name", "status", "template_id", "start_date", "end_date",
                       "days_of_week", "max_emails_per_day")

    def columns(self):
        return [
            Column("name", "Campaign Name", actions=True, render=self._name_link),
            Column("start_date", "Start Date", render=lambda r: format_day(r.get("start_date")) or "Not set"),
            Column("status", "Status", render=lambda r: status_label(r.get("status"))),
            Column("days_of_week", "Send Days", sortable=False, render=lambda r: days_label(r.get("days_of_week"))),
            Column("max_emails_per_day", "Daily Limit"),
            Column("sent_today_count", "Sent Today"),
            Column("updated_at", "Last Updated", render=lambda r: format_date(r.get("updated_at"))),
        ]

    def duplicate_payload(self, record):
        payload = super().duplicate_payload(record)
        payload["status"] = "draft"
        return payload

    def blank_record(self, client_id=None):
        record = super().blank_record(client_id)
        record.update({"status": "draft", "days_of_week": [], "max_emails_per_day": 50})
        return record


PAGES = [
    ClientsPage,
    ContactsPage,
    ContactListsPage,
    TemplatesPage,
    PdfTemplatesPage,
    CampaignsPage,
]
