import io
import os

import pytest
from werkzeug.datastructures import FileStorage

from clinic_portal.services import storage_service


def file_storage(name, content=b'data'):
    return FileStorage(stream=io.BytesIO(content), filename=name)


def test_allowed_file(app):
    with app.app_context():
        for name in ('a.pdf', 'B.JPG', 'c.jpeg', 'd.png', 'e.doc', 'f.docx'):
            assert storage_service.allowed_file(name)
        for name in ('a.exe', 'noext', '', 'archive.tar.gz'):
            assert not storage_service.allowed_file(name)


def test_upload_writes_under_bucket(app):
    with app.app_context():
        path = storage_service.upload(file_storage('Scan Result.PDF', b'pdf-bytes'))
        assert path.startswith('reports/')
        assert path.endswith('.pdf')

        full = os.path.join(app.config['STORAGE_ROOT'], 'medical-reports', path)
        with open(full, 'rb') as fh:
            assert fh.read() == b'pdf-bytes'


def test_upload_names_are_unique(app):
    with app.app_context():
        first = storage_service.upload(file_storage('a.png'))
        second = storage_service.upload(file_storage('a.png'))
        assert first != second


def test_upload_without_extension(app):
    with app.app_context():
        with pytest.raises(storage_service.StorageError):
            storage_service.upload(file_storage('README'))


def test_public_url(app):
    with app.app_context():
        assert storage_service.public_url('reports/1.pdf') == 'http://clinic.test/storage/medical-reports/reports/1.pdf'
        app.config['PUBLIC_BASE_URL'] = ''
        assert storage_service.public_url('reports/1.pdf') == '/storage/medical-reports/reports/1.pdf'


def test_serve_unknown_object(client):
    assert client.get('/storage/medical-reports/reports/missing.pdf').status_code == 404
    assert client.get('/storage/other-bucket/reports/missing.pdf').status_code == 404
