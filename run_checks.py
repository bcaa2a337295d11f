from fastapi.testclient import TestClient
from app.main import app

with TestClient(app) as client:
    print('ROOT:')
    print(client.get('/').json())

    print('\nHEALTH:')
    print(client.get('/health').json())

    print('\nSTORE HEALTH:')
    resp = client.get('/health/store')
    print(resp.status_code)
    print(resp.json())

    print('\nTOP PRIORITY:')
    print(client.get('/api/reports/top-priority').json())
