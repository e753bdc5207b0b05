from sqlalchemy.exc import OperationalError
from tests.test_lifecycle_helpers import seed_actor


def test_unknown_path_returns_error_json(client):
    resp = client.get('/non-existent-path')
    # Flask default 404 should be wrapped by error handler
    assert resp.status_code == 404
    body = resp.get_json()
    assert body['error']['status'] == 404
    assert 'detail' in body['error']


def test_missing_record_is_404_json(client):
    _, headers = seed_actor('err404@example.com', 'admin')
    resp = client.get('/workers/not-a-real-id', headers=headers)
    assert resp.status_code == 404
    assert resp.get_json()['error']['detail'] == 'worker not found'
    resp = client.post('/income/records/00000000-0000-0000-0000-000000000000/toggle-complete', headers=headers)
    assert resp.status_code == 404


def test_internal_error_shape(client, monkeypatch):
    _, headers = seed_actor('err500@example.com', 'user')
    import tracker.routes.workers as workers_mod

    class BoomSession:
        def query(self, *a, **k):
            raise RuntimeError('explode')

    monkeypatch.setattr(workers_mod, 'get_db', lambda: BoomSession())
    resp = client.get('/workers', headers=headers)
    assert resp.status_code == 500
    body = resp.get_json()
    assert body['error']['status'] == 500
    assert body['error']['title'] == 'Internal Server Error'


def test_database_unavailable_maps_to_503(client, monkeypatch):
    _, headers = seed_actor('err503@example.com', 'user')
    import tracker.routes.expenses as expenses_mod

    class DownSession:
        def query(self, *a, **k):
            raise OperationalError('SELECT 1', {}, Exception('connection refused'))

    monkeypatch.setattr(expenses_mod, 'get_db', lambda: DownSession())
    resp = client.get('/expenses', headers=headers)
    assert resp.status_code == 503
    assert resp.get_json()['error']['detail'] == 'Database unavailable'


def test_healthz(client):
    assert client.get('/healthz').get_json() == {'status': 'ok'}


def test_rejected_audit_entry_is_422_and_change_is_kept(client, monkeypatch):
    _, headers = seed_actor('err422@example.com', 'admin')
    import tracker.constants.audit as audit_constants
    monkeypatch.setattr(audit_constants, 'WORKER_CREATED', 'worker_hired')
    resp = client.post('/workers', json={'name': 'Kept', 'daily_income_amount': 40}, headers=headers)
    assert resp.status_code == 422
    assert resp.get_json()['error']['detail'].startswith('Change saved but audit entry rejected')
    from tracker import get_db
    from tracker.models.worker import Worker
    assert get_db().query(Worker).filter_by(name='Kept').count() == 1
