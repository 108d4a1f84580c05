from blog_api.main import main

main()
