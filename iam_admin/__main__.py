from iam_admin.main import main

main()
