from fastapi.testclient import TestClient
from app.main import app

client = TestClient(app)

print('ROOT:')
print(client.get('/').json())

print('\nHEALTH:')
print(client.get('/health').json())

print('\nSERVICE AREA:')
print(client.get('/validate-location').json())

print('\nINSIDE (6.9745, 79.95):')
resp = client.post('/validate-location', json={'latitude': 6.9745, 'longitude': 79.95})
print(resp.status_code, resp.json())

print('\nOUTSIDE (6.90, 79.90):')
resp = client.post('/validate-location', json={'latitude': 6.90, 'longitude': 79.90})
print(resp.status_code, resp.json())

print('\nDB HEALTH:')
resp = client.get('/health/db')
print(resp.status_code, resp.json())
