import pytest

import tidytranscript.main as main


@pytest.fixture
def client(monkeypatch):
    monkeypatch.delenv('OUTPUT_BUCKET', raising=False)
    return main.app.test_client()


def test_format_endpoint(client):
    rv = client.post('/format', json={'text': 'He left. However nobody noticed.'})
    assert rv.status_code == 200
    assert rv.get_json() == {'formatted': 'He left.\n\nHowever nobody noticed.'}


@pytest.mark.parametrize('body', [{}, {'text': 42}, ['text']])
def test_format_endpoint_rejects_bad_body(client, body):
    rv = client.post('/format', json=body)
    assert rv.status_code == 400


def test_process_endpoint(client, storage_client):
    storage_client.bucket('b').blob('Raw/talk.txt').data = 'Hello, how are you? I am fine.'

    rv = client.post('/process', json={'bucket': 'b', 'name': 'Raw/talk.txt'})

    assert rv.status_code == 200
    assert storage_client.bucket('b').blobs['Formatted/talk.txt'].data == 'Hello, how are you?\n\nI am fine.'


def test_process_endpoint_uses_output_bucket(client, storage_client, monkeypatch):
    monkeypatch.setenv('OUTPUT_BUCKET', 'out')
    storage_client.bucket('b').blob('Raw/talk.txt').data = 'text'

    rv = client.post('/process', json={'bucket': 'b', 'name': 'Raw/talk.txt'})

    assert rv.status_code == 200
    assert b'out/Formatted/talk.txt' in rv.data
    assert storage_client.bucket('out').blobs['Formatted/talk.txt'].data == 'text'


def test_process_endpoint_skip(client, storage_client):
    rv = client.post('/process', json={'bucket': 'b', 'name': 'notes/talk.txt'})
    assert rv.status_code == 200
    assert rv.data.startswith(b'Skipped')


def test_process_endpoint_missing_fields(client):
    rv = client.post('/process', json={'bucket': 'b'})
    assert rv.status_code == 400


def test_process_endpoint_error(client, monkeypatch):
    def boom(*a, **k):
        raise RuntimeError('bucket unavailable')

    monkeypatch.setattr(main.tasks, 'process_transcript_upload', boom)
    rv = client.post('/process', json={'bucket': 'b', 'name': 'Raw/talk.txt'})
    assert rv.status_code == 500
    assert b'bucket unavailable' in rv.data


def test_gcs_event(monkeypatch):
    calls = []
    monkeypatch.setenv('OUTPUT_BUCKET', 'out')
    monkeypatch.setattr(
        main.tasks, 'process_transcript_upload', lambda *a, **k: calls.append((a, k))
    )

    main.gcs_event({'bucket': 'b', 'name': 'Raw/talk.txt'}, None)
    main.gcs_event({'bucket': 'b'}, None)

    assert calls == [(('b', 'Raw/talk.txt'), {'output_bucket': 'out'})]
