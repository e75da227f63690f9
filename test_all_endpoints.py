#!/usr/bin/env python3
"""
End-to-end API Smoke Test for dothack-backend

Walks a full hackathon against a running server: registers an organizer, a
judge and two participants, creates an active event, forms a team, submits a
project, rates it and reads the leaderboard. Every step records its status
code against the expected one.

Usage:
    python test_all_endpoints.py --base-url http://localhost:8000
    python test_all_endpoints.py --base-url https://your-app.railway.app --save

Requirements:
    pip install httpx rich
"""

import argparse
import asyncio
import json
import time
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import httpx
from rich.console import Console
from rich.table import Table

console = Console()


class APITester:
    """Run the smoke flow and collect results"""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")
        self.results: List[Dict[str, Any]] = []
        self.ids: Dict[str, str] = {}
        self.run_tag = uuid.uuid4().hex[:8]

    async def call(
        self,
        client: httpx.AsyncClient,
        method: str,
        path: str,
        name: str,
        expected_status: int = 200,
        data: Optional[Dict] = None,
        params: Optional[Dict] = None,
    ) -> Optional[Any]:
        """Send one request, record the outcome and return the JSON body."""
        started = time.perf_counter()
        body = None
        error = None
        status_code = 0

        try:
            response = await client.request(method, path, json=data, params=params)
            status_code = response.status_code
            if response.content:
                body = response.json()
            if status_code != expected_status and isinstance(body, dict):
                error = body.get("error")
        except (httpx.HTTPError, ValueError) as e:
            error = f"{type(e).__name__}: {e}"

        result = {
            "name": name,
            "method": method,
            "path": path,
            "expected": expected_status,
            "status": status_code,
            "passed": status_code == expected_status,
            "response_time": time.perf_counter() - started,
            "error": error,
        }
        self.results.append(result)

        status_icon = "✅" if result["passed"] else "❌"
        console.print(
            f"{status_icon} {name}: {status_code} ({result['response_time']:.2f}s)"
        )
        return body

    async def register(self, client: httpx.AsyncClient, role: str, label: str) -> Optional[str]:
        email = f"{label}-{self.run_tag}@smoke.example.com"
        body = await self.call(
            client,
            "POST",
            "/users",
            f"Register {label}",
            data={"name": label.title(), "email": email, "password": "smoke-pass", "role": role},
        )
        self.ids[f"{label}_email"] = email
        return body.get("id") if isinstance(body, dict) else None

    async def run_all_tests(self):
        """Execute the flow in order; later steps use ids from earlier ones"""

        console.print("\n[bold blue]🚀 Starting API Smoke Test[/bold blue]\n")

        now = datetime.now(timezone.utc)

        async with httpx.AsyncClient(base_url=self.base_url, timeout=30.0) as client:
            await self.call(client, "GET", "/health", "Health Check")

            # Users
            organizer = await self.register(client, "organizer", "organizer")
            judge = await self.register(client, "judge", "judge")
            alice = await self.register(client, "participant", "alice")
            bob = await self.register(client, "participant", "bob")
            await self.call(
                client,
                "POST",
                "/users",
                "Duplicate registration (409 expected)",
                409,
                data={
                    "name": "Alice",
                    "email": self.ids["alice_email"],
                    "password": "smoke-pass",
                    "role": "participant",
                },
            )
            await self.call(
                client,
                "POST",
                "/users/login",
                "Login",
                data={"email": self.ids["alice_email"], "password": "smoke-pass"},
            )
            await self.call(
                client,
                "POST",
                "/users/login",
                "Login with wrong password (401 expected)",
                401,
                data={"email": self.ids["alice_email"], "password": "wrong-pass"},
            )

            # Events
            body = await self.call(
                client,
                "POST",
                "/events",
                "Create event",
                data={
                    "title": f"Smoke Hack {self.run_tag}",
                    "description": "Automated smoke test event",
                    "start_date": (now - timedelta(hours=1)).isoformat(),
                    "end_date": (now + timedelta(days=1)).isoformat(),
                    "max_participants": 10,
                    "judges": [judge] if judge else [],
                    "tracks": ["AI"],
                    "organizer_id": organizer or "unknown",
                },
            )
            event_id = body.get("id") if isinstance(body, dict) else "missing"

            await self.call(client, "GET", "/events", "List events")
            await self.call(client, "GET", f"/events/{event_id}", "Get event")
            await self.call(client, "GET", "/events/no-such-event", "Get event (404 expected)", 404)
            for user_id, label in ((alice, "alice"), (bob, "bob")):
                await self.call(
                    client,
                    "POST",
                    f"/events/{event_id}/join",
                    f"Join event ({label})",
                    data={"user_id": user_id},
                )
            await self.call(
                client,
                "POST",
                f"/events/{event_id}/join",
                "Join event twice (400 expected)",
                400,
                data={"user_id": alice},
            )

            # Teams
            body = await self.call(
                client,
                "POST",
                "/teams",
                "Create team",
                data={"name": f"Team {self.run_tag}", "leader_id": alice, "event_id": event_id},
            )
            team_id = body.get("id") if isinstance(body, dict) else "missing"
            body = await self.call(
                client,
                "POST",
                f"/teams/{team_id}/invite",
                "Invite to team",
                data={"email": self.ids["bob_email"], "invited_by": alice},
            )
            invite_id = body.get("invite_id") if isinstance(body, dict) else None
            await self.call(
                client,
                "POST",
                f"/teams/{team_id}/join",
                "Accept invite",
                data={"user_id": bob, "invite_id": invite_id},
            )
            await self.call(
                client,
                "POST",
                f"/teams/{team_id}/join",
                "Reuse accepted invite (400 expected)",
                400,
                data={"user_id": bob, "invite_id": invite_id},
            )
            await self.call(client, "GET", f"/teams/event/{event_id}", "List event teams")

            # Projects
            project = {
                "title": "Smoke Project",
                "description": "Built by the smoke test",
                "submitted_by": alice,
                "event_id": event_id,
                "github_url": "https://github.com/example/smoke",
                "track": "AI",
            }
            body = await self.call(client, "POST", "/projects", "Submit project", data=project)
            project_id = body.get("id") if isinstance(body, dict) else "missing"
            await self.call(
                client,
                "POST",
                "/projects",
                "Resubmit project (400 expected)",
                400,
                data=project,
            )
            await self.call(client, "GET", f"/projects/{project_id}", "Get project")

            # Ratings
            scores = {"innovation": 8, "technical": 9, "feasibility": 7, "presentation": 8}
            await self.call(
                client,
                "POST",
                "/ratings",
                "Rate with out-of-range score (400 expected)",
                400,
                data={
                    "project_id": project_id,
                    "judge_id": judge,
                    "event_id": event_id,
                    "scores": {**scores, "innovation": 11},
                },
            )
            body = await self.call(
                client,
                "POST",
                "/ratings",
                "Rate project",
                data={
                    "project_id": project_id,
                    "judge_id": judge,
                    "event_id": event_id,
                    "scores": scores,
                    "feedback": "Solid work",
                },
            )
            rating_id = body.get("id") if isinstance(body, dict) else "missing"
            await self.call(
                client,
                "PUT",
                f"/ratings/{rating_id}",
                "Revise rating",
                data={"judge_id": judge, "feedback": "Solid work, great demo"},
            )
            await self.call(client, "GET", f"/ratings/project/{project_id}", "Project ratings")
            await self.call(client, "GET", f"/events/{event_id}/stats", "Event stats")
            await self.call(client, "GET", f"/events/{event_id}/analytics", "Event analytics")
            await self.call(
                client,
                "GET",
                f"/events/{event_id}/leaderboard",
                "Leaderboard",
                params={"top_n": 5},
            )

            # Messaging
            await self.call(
                client,
                "POST",
                "/announcements",
                "Post announcement",
                data={
                    "title": "Welcome",
                    "content": "Hacking starts now",
                    "created_by": organizer,
                    "event_id": event_id,
                },
            )
            await self.call(client, "GET", f"/announcements/{event_id}", "Event announcements")
            body = await self.call(
                client,
                "POST",
                "/questions",
                "Ask question",
                data={
                    "title": "Wifi?",
                    "content": "What is the wifi password?",
                    "author_id": bob,
                    "event_id": event_id,
                },
            )
            question_id = body.get("id") if isinstance(body, dict) else "missing"
            await self.call(
                client,
                "PUT",
                f"/questions/{question_id}/answer",
                "Answer question",
                data={"answer": "hackathon2026", "answered_by": organizer},
            )
            await self.call(client, "GET", f"/questions/{event_id}", "Event questions")

    def print_summary(self):
        """Print test results summary"""

        console.print("\n[bold green]📊 Test Results Summary[/bold green]\n")

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Status", width=8)
        table.add_column("Step", width=44)
        table.add_column("Method", width=8)
        table.add_column("Expected", width=10)
        table.add_column("Got", width=10)
        table.add_column("Time", width=10)

        for result in self.results:
            status = "✅ PASS" if result["passed"] else "❌ FAIL"
            status_style = "green" if result["passed"] else "red"
            table.add_row(
                f"[{status_style}]{status}[/{status_style}]",
                result["name"],
                result["method"],
                str(result["expected"]),
                str(result["status"]),
                f"{result['response_time']:.2f}s",
            )

        console.print(table)

        total = len(self.results)
        passed_count = sum(1 for r in self.results if r["passed"])
        failed_count = total - passed_count
        pass_rate = (passed_count / total * 100) if total > 0 else 0

        console.print(f"\n[bold]Total Steps:[/bold] {total}")
        console.print(f"[bold green]Passed:[/bold green] {passed_count}")
        console.print(f"[bold red]Failed:[/bold red] {failed_count}")
        console.print(f"[bold blue]Pass Rate:[/bold blue] {pass_rate:.1f}%\n")

        if failed_count > 0:
            console.print("[bold red]❌ Failed Steps:[/bold red]\n")
            for result in self.results:
                if not result["passed"]:
                    console.print(f"[red]• {result['name']}[/red]")
                    console.print(f"  Method: {result['method']} {result['path']}")
                    console.print(f"  Expected: {result['expected']}, Got: {result['status']}")
                    if result["error"]:
                        console.print(f"  Error: {result['error']}")
                    console.print()

    def save_results(self, filename: str = "test_results.json"):
        """Save test results to JSON file"""
        output = {
            "timestamp": datetime.now().isoformat(),
            "base_url": self.base_url,
            "total_tests": len(self.results),
            "passed": sum(1 for r in self.results if r["passed"]),
            "failed": sum(1 for r in self.results if not r["passed"]),
            "results": self.results,
        }

        with open(filename, "w") as f:
            json.dump(output, f, indent=2)

        console.print(f"[green]✅ Results saved to {filename}[/green]")


async def main() -> int:
    parser = argparse.ArgumentParser(description="Smoke test the dothack-backend API")
    parser.add_argument(
        "--base-url",
        default="http://localhost:8000",
        help="Base URL of the API (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Save results to test_results.json",
    )

    args = parser.parse_args()

    tester = APITester(args.base_url)

    console.print(f"[bold cyan]Testing API at:[/bold cyan] {args.base_url}\n")

    await tester.run_all_tests()
    tester.print_summary()

    if args.save:
        tester.save_results()

    return 0 if all(r["passed"] for r in tester.results) else 1


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
