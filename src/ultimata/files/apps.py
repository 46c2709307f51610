from django.apps import AppConfig


class FilesConfig(AppConfig):
    name = "ultimata.files"
    label = "files"
    verbose_name = "Files"
