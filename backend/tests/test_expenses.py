from tests.test_utils_seed import ensure_worker
from tests.test_lifecycle_helpers import seed_actor, create_resource_and_assert, assert_toggle, audit_entries


def test_create_expense_and_audit(client):
    _, headers = seed_actor('exp1@example.com', 'user')
    w = ensure_worker('Spender')
    e = create_resource_and_assert(client, '/expenses', {
        'worker_id': w.id, 'amount': 42.5, 'category': 'transport', 'date': '2026-10-03', 'description': 'bus'
    }, headers)
    assert e['is_paid'] is False
    assert e['expense_type'] == 'one_time'
    assert e['recurrence_pattern'] is None

    entries = audit_entries(e['id'])
    assert len(entries) == 1
    assert entries[0].action_type == 'record_created'
    assert entries[0].record_type == 'expense'
    assert entries[0].worker_id == w.id
    assert entries[0].new_value == {'amount': 42.5, 'category': 'transport', 'expense_type': 'one_time'}


def test_recurring_expense_needs_pattern(client):
    _, headers = seed_actor('exp2@example.com', 'user')
    w = ensure_worker('Rent')
    base = {'worker_id': w.id, 'amount': 300, 'category': 'accommodation', 'expense_type': 'recurring'}
    assert client.post('/expenses', json=base, headers=headers).status_code == 400
    e = create_resource_and_assert(client, '/expenses', dict(base, recurrence_pattern='monthly'), headers)
    assert e['recurrence_pattern'] == 'monthly'


def test_expense_validation(client):
    _, headers = seed_actor('exp3@example.com', 'user')
    w = ensure_worker('Checks')
    assert client.post('/expenses', json={'worker_id': w.id, 'amount': 0}, headers=headers).status_code == 400
    assert client.post('/expenses', json={'worker_id': w.id, 'amount': 5, 'category': 'snacks'}, headers=headers).status_code == 400
    assert client.post('/expenses', json={'worker_id': w.id, 'amount': 5, 'expense_type': 'sometimes'}, headers=headers).status_code == 400
    assert client.post('/expenses', json={'amount': 5}, headers=headers).status_code == 400


def test_toggle_paid_role_gate(client):
    user, user_headers = seed_actor('exp4u@example.com', 'user')
    admin, admin_headers = seed_actor('exp4a@example.com', 'admin')
    w = ensure_worker('Payee')
    e = create_resource_and_assert(client, '/expenses', {'worker_id': w.id, 'amount': 20}, user_headers)
    url = f"/expenses/{e['id']}/toggle-paid"

    paid = assert_toggle(client, url, user_headers, 200, 'is_paid', True)
    assert paid.get_json()['paid_by'] == str(user.id)
    denied = client.post(url, headers=user_headers)
    assert denied.status_code == 403
    assert denied.get_json()['error']['detail'] == 'Only admins can unmark paid expenses'
    unpaid = assert_toggle(client, url, admin_headers, 200, 'is_paid', False)
    assert unpaid.get_json()['paid_at'] is None

    entries = audit_entries(e['id'])
    assert [e.action_type for e in entries] == ['record_created', 'expense_marked_paid', 'expense_marked_unpaid']
    assert entries[2].performed_by == str(admin.id)
    assert entries[2].previous_value == {'is_paid': True}
    assert entries[2].new_value == {'is_paid': False}
