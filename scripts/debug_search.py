import argparse
import asyncio
import os
import sys
import uuid

# Ensure src is in pythonpath
sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from dotenv import load_dotenv
load_dotenv()

from design_assistant.api.dependencies import get_ranker
from design_assistant.config import settings
from design_assistant.db import FileStore, get_session_factory
from design_assistant.db.session import dispose_engine
from design_assistant.search import SearchPipeline, tokenize


async def main(query: str, team_id: str | None, workspace_id: str | None, email: str | None):
    try:
        async with get_session_factory()() as session:
            store = FileStore(session)

            if workspace_id:
                ws_id = uuid.UUID(workspace_id)
            elif team_id:
                workspace = await store.get_workspace(team_id)
                if workspace is None:
                    print(f"No workspace for team {team_id}")
                    return
                ws_id = workspace.id
            else:
                # Random id: nothing is scoped to it, so only the legacy tier can match
                ws_id = uuid.uuid4()

            pipeline = SearchPipeline(
                store,
                get_ranker(),
                working_set=settings.search_working_set,
                rerank_top_k=settings.rerank_top_k,
            )

            print("Query:", query)
            print("Tokens:", tokenize(query))
            rows = await pipeline.search(query, ws_id, email, limit=settings.search_limit)
    finally:
        await dispose_engine()

    print(f"Rows ({len(rows)}):")
    for row in rows:
        print(f"  - {row.display_name} | {row.file_url} | privacy={row.privacy or '-'}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run a single search and print the results.")
    parser.add_argument("query", nargs="?", default="homepage")
    parser.add_argument("--team", dest="team_id")
    parser.add_argument("--workspace", dest="workspace_id")
    parser.add_argument("--email")
    args = parser.parse_args()

    try:
        asyncio.run(main(args.query, args.team_id, args.workspace_id, args.email))
    except Exception as exc:
        print(f"Search failed: {exc}", file=sys.stderr)
        sys.exit(1)
