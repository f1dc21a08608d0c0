import asyncio
import sys

from dotenv import load_dotenv

load_dotenv()

from reelhub.main import build_store  # noqa: E402 settings read the .env loaded above


async def main():
    store = build_store()
    await store.initialize()
    if len(sys.argv) > 1:
        await store.search(" ".join(sys.argv[1:]))

    state = store.snapshot()
    if state.error:
        print(state.error)

    print(f"Trending (page {state.trending.page}/{state.trending.total_pages}):")
    for movie in state.trending.movies:
        print(f"  [{movie.id}] {movie.title} ({movie.release_year or '?'}) {movie.vote_average}")

    if state.search_query:
        print(f"Search '{state.search_query}':")
        for movie in state.search.movies:
            print(f"  [{movie.id}] {movie.title} ({movie.release_year or '?'})")

    store.client.close()


if __name__ == "__main__":
    asyncio.run(main())
