from tracker import get_db
from tracker.models.income_record import IncomeRecord, is_payment_complete
from tracker.models.worker import Worker
from tests.test_utils_seed import ensure_worker
from tests.test_lifecycle_helpers import seed_actor, create_resource_and_assert, assert_toggle, audit_entries


def _submit(client, headers, worker_id, paid, day='2026-10-05', **extra):
    payload = {'worker_id': worker_id, 'date': day, 'paid_amount': paid}
    payload.update(extra)
    return create_resource_and_assert(client, '/income/records', payload, headers)


def test_completion_threshold():
    assert is_payment_complete(100, 100)
    assert is_payment_complete(120, 100)
    assert not is_payment_complete(99.99, 100)
    assert is_payment_complete(0, 0)


def test_upsert_keeps_one_row_and_audits_each_submission(client):
    _, headers = seed_actor('inc1@example.com', 'user')
    w = ensure_worker('Up', 100)
    first = _submit(client, headers, w.id, 40, notes='morning')
    assert first['is_completed'] is False
    assert first['expected_amount'] == 100
    assert first['remaining_balance'] == 60

    second = _submit(client, headers, w.id, 99.99)
    assert second['id'] == first['id']
    assert second['is_completed'] is False
    assert second['remaining_balance'] == 0.01
    assert second['notes'] == 'morning'

    third = _submit(client, headers, w.id, 100)
    assert third['is_completed'] is True
    assert third['completed_at'] is not None

    session = get_db()
    assert session.query(IncomeRecord).filter_by(worker_id=w.id).count() == 1
    entries = audit_entries(first['id'])
    assert [e.action_type for e in entries] == ['partial_payment_added'] * 3
    assert [e.new_value for e in entries] == [
        {'paid_amount': 40, 'is_completed': False},
        {'paid_amount': 99.99, 'is_completed': False},
        {'paid_amount': 100, 'is_completed': True},
    ]
    assert all(e.previous_value is None and e.worker_id == w.id for e in entries)


def test_expected_amount_follows_current_daily_rate(client):
    _, headers = seed_actor('inc2@example.com', 'user')
    w = ensure_worker('Rate', 100)
    rec = _submit(client, headers, w.id, 80)
    session = get_db()
    session.get(Worker, w.id).daily_income_amount = 80
    session.commit()
    again = _submit(client, headers, w.id, 80)
    assert again['id'] == rec['id']
    assert again['expected_amount'] == 80
    assert again['is_completed'] is True


def test_submit_validation(client):
    _, headers = seed_actor('inc3@example.com', 'user')
    w = ensure_worker('Val', 100)
    assert client.post('/income/records', json={'paid_amount': 5}, headers=headers).status_code == 400
    assert client.post('/income/records', json={'worker_id': w.id, 'paid_amount': -5}, headers=headers).status_code == 400
    assert client.post('/income/records', json={'worker_id': w.id, 'paid_amount': 5, 'date': '2026-13-01'}, headers=headers).status_code == 400
    assert client.post('/income/records', json={'worker_id': 'missing', 'paid_amount': 5}, headers=headers).status_code == 404


def test_completion_toggle_role_gate(client):
    _, user_headers = seed_actor('inc4u@example.com', 'user')
    _, admin_headers = seed_actor('inc4a@example.com', 'admin')
    w = ensure_worker('Tog', 100)
    rec = _submit(client, user_headers, w.id, 30)
    url = f"/income/records/{rec['id']}/toggle-complete"

    # user may check it, paid amount untouched
    resp = assert_toggle(client, url, user_headers, 200, 'is_completed', True)
    assert resp.get_json()['paid_amount'] == 30
    # but only an admin may uncheck
    denied = client.post(url, headers=user_headers)
    assert denied.status_code == 403
    assert denied.get_json()['error']['detail'] == 'Only admins can uncheck completed payments'
    assert_toggle(client, url, admin_headers, 200, 'is_completed', False)

    entries = audit_entries(rec['id'])
    assert [e.action_type for e in entries] == ['partial_payment_added', 'full_completion_checked', 'completion_unchecked']
    assert entries[1].previous_value == {'is_completed': False}
    assert entries[1].new_value == {'is_completed': True}
    assert entries[1].performed_by_role == 'user'
    assert entries[2].performed_by_role == 'admin'


def test_edit_payment_threshold_and_gate(client):
    _, user_headers = seed_actor('inc5u@example.com', 'user')
    _, admin_headers = seed_actor('inc5a@example.com', 'admin')
    w = ensure_worker('Edit', 100)
    rec = _submit(client, user_headers, w.id, 50)
    url = f"/income/records/{rec['id']}/payment"

    resp = client.put(url, json={'paid_amount': 100}, headers=user_headers)
    assert resp.status_code == 200
    assert resp.get_json()['is_completed'] is True

    denied = client.put(url, json={'paid_amount': 10}, headers=user_headers)
    assert denied.status_code == 403
    assert denied.get_json()['error']['detail'] == 'Only admins can edit completed payments'

    resp = client.put(url, json={'paid_amount': 99.99, 'reason': 'typo'}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.get_json()['is_completed'] is False
    assert resp.get_json()['completed_by'] is None

    edits = [e for e in audit_entries(rec['id']) if e.action_type == 'amount_edited']
    assert [(e.previous_value, e.new_value) for e in edits] == [
        ({'paid_amount': 50}, {'paid_amount': 100}),
        ({'paid_amount': 100}, {'paid_amount': 99.99}),
    ]
    assert edits[-1].reason == 'typo'
