"""
# Health Route

`GET /health` pings MongoDB. It answers 200 `{"status": "healthy", "database": "connected"}`
when the database responds and 503 otherwise, so it can back a container readiness probe:

```yaml
readinessProbe:
  httpGet:
    path: /health
    port: 8000
```
"""

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from blog_backend.routes.dependencies import get_services
from blog_backend.services.container import ServiceContainer

router = APIRouter(tags=["System"])


@router.get("/health")
async def health(services: ServiceContainer = Depends(get_services)):
    if await services.db_manager.health_check():
        return {"status": "healthy", "database": "connected"}

    return JSONResponse(status_code=503, content={"status": "unhealthy", "database": "unavailable"})
