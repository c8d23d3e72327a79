import uvicorn

from blog_api.config import settings


def main():
    uvicorn.run("blog_api.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
