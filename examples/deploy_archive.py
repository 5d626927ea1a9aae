#!/usr/bin/env python3
"""
GitZip - Deploy an Archive Example

Walks the wizard through every step for a zip file on disk:
1. Verify the access token
2. Decode the archive
3. Ask Gemini for a name, description and README (if a key is set)
4. Publish the files as a new repository

Run with:
    GITHUB_TOKEN=ghp_... GEMINI_API_KEY=... python examples/deploy_archive.py project.zip
"""

import asyncio
import logging
import os
import sys
from pathlib import Path

from gitzip import DeploymentWizard, Settings, configure_logging


async def deploy(path: Path, token: str) -> int:
    wizard = DeploymentWizard(Settings.from_env())
    wizard.log.subscribe(lambda entry: print(f"   [{entry.severity.value}] {entry.message}"))

    try:
        # Step 1: Verify the token
        print("1. Verifying access token...")
        if not await wizard.connect(token):
            print(f"   Error: {wizard.error}")
            return 1
        print(f"   Connected as {wizard.user.login}")

        # Step 2: Decode the archive
        print(f"\n2. Reading {path.name}...")
        if not wizard.upload(path.name, path.read_bytes()):
            print(f"   Error: {wizard.error}")
            return 1
        print(f"   {len(wizard.files)} files, suggested name: {wizard.request.name}")

        # Step 3: Optional AI metadata
        if wizard.settings.genai_api_key:
            print("\n3. Generating metadata...")
            if await wizard.generate_metadata():
                print(f"   Name: {wizard.request.name}")
                print(f"   Description: {wizard.request.description}")
            else:
                print(f"   Skipped: {wizard.error}")
        else:
            print("\n3. No GEMINI_API_KEY set, keeping the suggested name")

        # Step 4: Publish
        print("\n4. Deploying...")
        if not await wizard.deploy():
            print(f"\n   Deployment failed: {wizard.error}")
            return 1

        print(f"\n=== Published to {wizard.deploy_url} ===")
        return 0
    finally:
        await wizard.close()


def main() -> None:
    if len(sys.argv) != 2:
        print("usage: deploy_archive.py <archive.zip>")
        sys.exit(2)

    token = os.environ.get("GITHUB_TOKEN")
    if not token:
        print("GITHUB_TOKEN environment variable not set")
        sys.exit(2)

    configure_logging(level=logging.WARNING)
    sys.exit(asyncio.run(deploy(Path(sys.argv[1]), token)))


if __name__ == "__main__":
    main()
