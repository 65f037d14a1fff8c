#!/usr/bin/env python3
"""
Run script for the VoxPlan brief pipeline
"""
import uvicorn

from voxplan.config.settings import settings

if __name__ == "__main__":
    uvicorn.run("voxplan.main:app", host=settings.host, port=settings.port, reload=settings.debug)
